"""Core records of the airline roster: departure dates and times, passengers, planes and flights."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

LEN_FLIGHT_ID = 15
LEN_DESTINATION = 16
LEN_LAST_NAME = 12
LEN_FIRST_NAME = 12
LEN_PLANE_ID = 15
LEN_PLANE_TYPE = 40
MAX_PLANE = 300
LEN_CMND = 15

SEATS_PER_PAGE = 10
FLIGHTS_PER_PAGE = 10
PLANES_PER_PAGE = 10
PASSENGERS_PER_PAGE = 10

MIN_PLANE_SEATS = 20

_DATE_RE = re.compile(r"^\s*(-?\d+)\s*/\s*(-?\d+)\s*/\s*(-?\d+)\s*$")
_TIME_RE = re.compile(r"^\s*(-?\d+)\s*:\s*(-?\d+)\s*$")


class Status(Enum):
    """State of a flight."""

    CANCELLED = 0
    AVAILABLE = 1
    SOLD_OUT = 2
    COMPLETED = 3

    @property
    def label(self) -> str:
        """The text used for this status in data files and listings."""
        return self.name.lower().replace("_", " ")

    @classmethod
    def from_label(cls, text: str) -> "Status":
        """Return the status whose label is ``text``."""
        key = text.strip().upper().replace(" ", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown flight status: {text!r}") from None


def valid_date(day: int, month: int, year: int) -> bool:
    """Return True if the date exists and its year is after 1900."""
    if year <= 1900 or not 1 <= month <= 12:
        return False
    days_in_month = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
    leap = (year % 4 == 0 and year % 100 != 0) or year % 400 == 0
    if leap:
        days_in_month[1] = 29
    return 1 <= day <= days_in_month[month - 1]


def valid_time(hour: int, minute: int) -> bool:
    """Return True if the hour and minute form a valid clock time."""
    return 0 <= hour <= 23 and 0 <= minute <= 59


@dataclass(frozen=True)
class DepartureDate:
    """A calendar day of departure."""

    day: int
    month: int
    year: int

    def __str__(self) -> str:
        return f"{self.day:02d}/{self.month:02d}/{self.year:04d}"

    def to_file(self) -> str:
        """Render the date the way flight files store it."""
        return f"{self.day:02d} / {self.month:02d} / {self.year}"

    @classmethod
    def parse(cls, text: str) -> "DepartureDate":
        """Parse ``d/m/y``, with or without spaces around the slashes."""
        match = _DATE_RE.match(text)
        if match is None:
            raise ValueError(f"not a date: {text!r}")
        day, month, year = (int(g) for g in match.groups())
        return cls(day, month, year)


@dataclass(frozen=True)
class DepartureTime:
    """A clock time of departure."""

    hour: int
    minute: int

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def to_file(self) -> str:
        """Render the time the way flight files store it."""
        return f"{self.hour:02d} : {self.minute:02d}"

    @classmethod
    def parse(cls, text: str) -> "DepartureTime":
        """Parse ``h:m``, with or without spaces around the colon."""
        match = _TIME_RE.match(text)
        if match is None:
            raise ValueError(f"not a time: {text!r}")
        hour, minute = (int(g) for g in match.groups())
        return cls(hour, minute)


def has_departed(date: DepartureDate, time: DepartureTime, now: Optional[datetime] = None) -> bool:
    """Return True if ``now`` is at or after the scheduled departure.

    Out-of-range fields roll over into the next unit, as calendar arithmetic does.
    """
    if now is None:
        now = datetime.now()
    base = datetime(date.year + (date.month - 1) // 12, (date.month - 1) % 12 + 1, 1)
    scheduled = base + timedelta(days=date.day - 1, hours=time.hour, minutes=time.minute)
    return now >= scheduled


def _lines(text: str, needed: int, what: str) -> list[str]:
    lines = text.splitlines()
    if len(lines) < needed:
        raise ValueError(f"{what} record is truncated")
    return lines


@dataclass
class Passenger:
    """A passenger identified by an ID-card number (CMND)."""

    cmnd: str = ""
    last_name: str = ""
    first_name: str = ""
    gender: Optional[bool] = None
    number_of_tickets: int = 0

    def is_valid(self) -> bool:
        """Return True if every identifying field has been filled in."""
        return bool(self.cmnd and self.last_name and self.first_name) and self.gender is not None

    def dumps(self) -> str:
        """Serialise the passenger to its file form."""
        if self.gender is None:
            raise ValueError("passenger has no gender")
        return (
            f"{self.cmnd}\n{self.last_name}\n{self.first_name}\n"
            f"{int(self.gender)}\n{self.number_of_tickets}\n"
        )

    @classmethod
    def loads(cls, text: str) -> "Passenger":
        """Read a passenger from its file form."""
        lines = _lines(text, 5, "passenger")
        gender_text = lines[3].strip()
        if gender_text not in ("0", "1"):
            raise ValueError(f"bad gender value: {gender_text!r}")
        return cls(
            cmnd=lines[0].strip(),
            last_name=lines[1],
            first_name=lines[2].strip(),
            gender=gender_text == "1",
            number_of_tickets=int(lines[4]),
        )


@dataclass
class Plane:
    """An aircraft with its seat count and number of completed flights."""

    plane_id: str = ""
    plane_type: str = ""
    number_of_seats: int = 0
    number_flights_performed: int = 0

    def dumps(self, index: int) -> str:
        """Serialise the plane, preceded by its position in the plane list."""
        return (
            f"{index}\n{self.plane_id}\n{self.plane_type}\n"
            f"{self.number_of_seats}\n{self.number_flights_performed}\n"
        )

    @classmethod
    def loads(cls, text: str) -> tuple[int, "Plane"]:
        """Read a plane file; return its list position and the plane."""
        lines = _lines(text, 5, "plane")
        plane = cls(
            plane_id=lines[1].strip(),
            plane_type=lines[2],
            number_of_seats=int(lines[3]),
            number_flights_performed=int(lines[4]),
        )
        return int(lines[0]), plane


@dataclass
class Flight:
    """A scheduled flight; ``seats`` holds the CMND of each seat's holder or None."""

    flight_id: str
    plane_id: str
    destination: str
    date: DepartureDate
    time: DepartureTime
    status: Status = Status.AVAILABLE
    seats: list[Optional[str]] = field(default_factory=list)

    @property
    def total_seats(self) -> int:
        """Number of seats on the flight."""
        return len(self.seats)

    def can_book(self, cmnd: str) -> bool:
        """Return True if the passenger holds no seat on this flight yet."""
        return cmnd not in self.seats

    def passenger_seats(self) -> list[int]:
        """Indices of the booked seats, in seat order."""
        return [i for i, holder in enumerate(self.seats) if holder is not None]

    def available_seats(self) -> list[int]:
        """Indices of the free seats, in seat order."""
        return [i for i, holder in enumerate(self.seats) if holder is None]

    def dumps(self) -> str:
        """Serialise the flight to its file form."""
        head = [
            self.flight_id,
            self.plane_id,
            self.destination,
            self.date.to_file(),
            self.time.to_file(),
            str(self.total_seats),
            self.status.label,
        ]
        tickets = [f"{i} {self.seats[i]}" for i in self.passenger_seats()]
        return "".join(line + "\n" for line in head + tickets)

    @classmethod
    def loads(cls, text: str) -> "Flight":
        """Read a flight from its file form."""
        lines = _lines(text, 7, "flight")
        total = int(lines[5])
        try:
            status = Status.from_label(lines[6])
        except ValueError:
            status = Status.AVAILABLE
        seats: list[Optional[str]] = [None] * total
        for line in lines[7:]:
            parts = line.split()
            if not parts:
                continue
            if len(parts) != 2:
                raise ValueError(f"bad ticket line: {line!r}")
            index = int(parts[0])
            if not 0 <= index < total:
                raise ValueError(f"seat {index} out of range")
            seats[index] = parts[1]
        return cls(
            flight_id=lines[0].strip(),
            plane_id=lines[1].strip(),
            destination=lines[2],
            date=DepartureDate.parse(lines[3]),
            time=DepartureTime.parse(lines[4]),
            status=status,
            seats=seats,
        )