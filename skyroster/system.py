"""Airline records kept on disk: planes, flights and the passengers who hold tickets."""

from __future__ import annotations

import bisect
import dataclasses
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from .avl import AVLTree
from .models import (
    MAX_PLANE,
    DepartureDate,
    DepartureTime,
    Flight,
    Passenger,
    Plane,
    Status,
    has_departed,
    valid_date,
    valid_time,
)


class AirlineError(Exception):
    """Base class for rule violations reported by the airline system."""


class PlaneExistsError(AirlineError):
    """A plane with this ID is already registered."""


class PlaneNotFoundError(AirlineError):
    """No plane has this ID."""


class PlaneInUseError(AirlineError):
    """The plane is assigned to a flight and cannot be deleted."""


class PlaneListFullError(AirlineError):
    """The plane list holds the maximum number of planes."""


class FlightExistsError(AirlineError):
    """A flight with this ID already exists."""


class FlightNotFoundError(AirlineError):
    """No flight has this ID."""


class FlightNotUpdatableError(AirlineError):
    """The flight is cancelled or completed and its schedule cannot change."""


class FlightNotCancellableError(AirlineError):
    """The flight is completed and cannot be cancelled."""


class FlightAlreadyCancelledError(AirlineError):
    """The flight has already been cancelled."""


class DepartureInPastError(AirlineError):
    """The requested departure lies in the past."""


class SeatTakenError(AirlineError):
    """The seat, or every seat of the flight, is already booked."""


class AlreadyBookedError(AirlineError):
    """The passenger already holds a seat on this flight."""


class BookingExpiredError(AirlineError):
    """The flight has departed; tickets can no longer be booked."""


class AirlineSystem:
    """Planes, flights and passengers, mirrored to text files under ``data_dir``."""

    def __init__(self, data_dir: Union[str, Path] = "data") -> None:
        self.data_dir = Path(data_dir)
        self.planes: list[Plane] = []
        self.flights: list[Flight] = []
        self.passengers = AVLTree()

    # ----------------------------------------------------------------- files

    def _folder(self, name: str) -> Path:
        folder = self.data_dir / name
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    def _plane_path(self, plane_id: str) -> Path:
        return self._folder("Planes") / f"{plane_id}.txt"

    def _flight_path(self, flight_id: str) -> Path:
        return self._folder("Flights") / f"{flight_id}.txt"

    def _passenger_path(self, cmnd: str) -> Path:
        return self._folder("Passenger") / f"{cmnd}.txt"

    def _save_plane_at(self, index: int) -> None:
        plane = self.planes[index]
        self._plane_path(plane.plane_id).write_text(plane.dumps(index))

    def _save_plane(self, plane: Plane) -> None:
        self._save_plane_at(self.planes.index(plane))

    def _save_flight(self, flight: Flight) -> None:
        self._flight_path(flight.flight_id).write_text(flight.dumps())

    def _save_passenger(self, passenger: Passenger) -> None:
        self._passenger_path(passenger.cmnd).write_text(passenger.dumps())

    def _release_ticket(self, cmnd: str) -> None:
        passenger = self.passengers.search(cmnd)
        if passenger is None:
            return
        passenger.number_of_tickets -= 1
        if passenger.number_of_tickets <= 0:
            self._passenger_path(cmnd).unlink(missing_ok=True)
            self.passengers.erase(cmnd)
        else:
            self._save_passenger(passenger)

    @staticmethod
    def _text_files(folder: Path) -> Iterable[Path]:
        return (p for p in folder.iterdir() if p.is_file() and p.suffix == ".txt")

    # ------------------------------------------------------------ loading

    def load(self, now: Optional[datetime] = None) -> None:
        """Read passengers, planes and flights from disk.

        Cancelled and completed flights are dropped and their tickets released;
        flights that have departed since the last run are marked completed.
        """
        self.passengers = AVLTree()
        for path in self._text_files(self._folder("Passenger")):
            self.passengers.insert(Passenger.loads(path.read_text()))

        indexed: list[tuple[int, Plane]] = []
        for path in self._folder("Planes").iterdir():
            if path.is_file():
                indexed.append(Plane.loads(path.read_text()))
        indexed.sort(key=lambda item: item[0])
        self.planes = [plane for _, plane in indexed]

        self.flights = []
        for path in sorted(self._text_files(self._folder("Flights")), key=lambda p: p.name):
            flight = Flight.loads(path.read_text())
            if flight.status in (Status.CANCELLED, Status.COMPLETED):
                for holder in flight.seats:
                    if holder is not None:
                        self._release_ticket(holder)
                path.unlink(missing_ok=True)
                continue
            plane = self.find_plane(flight.plane_id)
            if plane is not None and has_departed(flight.date, flight.time, now):
                plane.number_flights_performed += 1
                flight.status = Status.COMPLETED
                self._save_flight(flight)
                self._save_plane(plane)
            self.flights.append(flight)

    def refresh_flights(self, now: Optional[datetime] = None) -> None:
        """Mark open flights that have departed as completed and save them."""
        for flight in self.flights:
            if flight.status not in (Status.AVAILABLE, Status.SOLD_OUT):
                continue
            if has_departed(flight.date, flight.time, now):
                flight.status = Status.COMPLETED
                plane = self.find_plane(flight.plane_id)
                if plane is not None:
                    plane.number_flights_performed += 1
                    self._save_plane(plane)
            self._save_flight(flight)

    # ------------------------------------------------------------ lookups

    def find_plane(self, plane_id: str) -> Optional[Plane]:
        """Return the plane with this ID, or None."""
        return next((p for p in self.planes if p.plane_id == plane_id), None)

    def find_flight(self, flight_id: str) -> Optional[Flight]:
        """Return the flight with this ID, or None."""
        return next((f for f in self.flights if f.flight_id == flight_id), None)

    def find_passenger(self, cmnd: str) -> Optional[Passenger]:
        """Return the stored passenger with this CMND, or None."""
        return self.passengers.search(cmnd)

    def _require_flight(self, flight_id: str) -> Flight:
        flight = self.find_flight(flight_id)
        if flight is None:
            raise FlightNotFoundError(flight_id)
        return flight

    # ------------------------------------------------------------- planes

    def add_plane(self, plane: Plane) -> Plane:
        """Register a copy of ``plane`` at the end of the plane list."""
        if len(self.planes) >= MAX_PLANE:
            raise PlaneListFullError(plane.plane_id)
        if self.find_plane(plane.plane_id) is not None:
            raise PlaneExistsError(plane.plane_id)
        stored = dataclasses.replace(plane)
        self.planes.append(stored)
        self._save_plane_at(len(self.planes) - 1)
        return stored

    def update_plane(self, plane: Plane) -> Plane:
        """Replace type, seat count and flight count of the plane with the same ID."""
        stored = self.find_plane(plane.plane_id)
        if stored is None:
            raise PlaneNotFoundError(plane.plane_id)
        stored.plane_type = plane.plane_type
        stored.number_of_seats = plane.number_of_seats
        stored.number_flights_performed = plane.number_flights_performed
        self._save_plane(stored)
        return stored

    def delete_plane(self, plane_id: str) -> None:
        """Remove a plane no flight uses; later planes move up one place."""
        if any(f.plane_id == plane_id for f in self.flights):
            raise PlaneInUseError(plane_id)
        plane = self.find_plane(plane_id)
        if plane is None:
            raise PlaneNotFoundError(plane_id)
        index = self.planes.index(plane)
        self._plane_path(plane_id).unlink(missing_ok=True)
        del self.planes[index]
        for k in range(index, len(self.planes)):
            self._save_plane_at(k)

    def planes_by_flights(self) -> list[Plane]:
        """Reorder the planes by flights performed, most first, and save the new order."""
        ascending = sorted(self.planes, key=lambda p: p.number_flights_performed)
        self.planes = ascending[::-1]
        for k in range(len(self.planes)):
            self._save_plane_at(k)
        return list(self.planes)

    # ------------------------------------------------------------ flights

    def create_flight(self, flight: Flight, now: Optional[datetime] = None) -> Flight:
        """Schedule a new flight on an existing plane with every seat free."""
        if self.find_flight(flight.flight_id) is not None:
            raise FlightExistsError(flight.flight_id)
        plane = self.find_plane(flight.plane_id)
        if plane is None:
            raise PlaneNotFoundError(flight.plane_id)
        self._check_schedule(flight.date, flight.time, now)
        created = dataclasses.replace(
            flight,
            status=Status.AVAILABLE,
            seats=[None] * plane.number_of_seats,
        )
        position = bisect.bisect_left(
            self.flights, created.flight_id, key=lambda f: f.flight_id
        )
        self.flights.insert(position, created)
        self._save_flight(created)
        return created

    @staticmethod
    def _check_schedule(
        date: DepartureDate, time: DepartureTime, now: Optional[datetime]
    ) -> None:
        if not valid_date(date.day, date.month, date.year):
            raise ValueError(f"invalid date: {date}")
        if not valid_time(time.hour, time.minute):
            raise ValueError(f"invalid time: {time}")
        if has_departed(date, time, now):
            raise DepartureInPastError(f"{date} {time}")

    def update_flight(
        self,
        flight_id: str,
        date: DepartureDate,
        time: DepartureTime,
        now: Optional[datetime] = None,
    ) -> Flight:
        """Move an open flight to a new departure date and time."""
        flight = self._require_flight(flight_id)
        self._check_schedule(date, time, now)
        if flight.status in (Status.CANCELLED, Status.COMPLETED):
            raise FlightNotUpdatableError(flight_id)
        flight.date = date
        flight.time = time
        self._save_flight(flight)
        return flight

    def cancel_flight(self, flight_id: str) -> Flight:
        """Mark a flight cancelled."""
        flight = self._require_flight(flight_id)
        if flight.status is Status.COMPLETED:
            raise FlightNotCancellableError(flight_id)
        if flight.status is Status.CANCELLED:
            raise FlightAlreadyCancelledError(flight_id)
        flight.status = Status.CANCELLED
        self._save_flight(flight)
        return flight

    # ------------------------------------------------------------ tickets

    def book_seat(
        self,
        flight_id: str,
        seat: int,
        passenger: Passenger,
        now: Optional[datetime] = None,
    ) -> Passenger:
        """Book ``seat`` for ``passenger``; return the stored passenger record."""
        flight = self._require_flight(flight_id)
        if flight.status is Status.CANCELLED:
            raise FlightAlreadyCancelledError(flight_id)
        if flight.status is Status.COMPLETED:
            raise BookingExpiredError(flight_id)
        if flight.status is Status.SOLD_OUT:
            raise SeatTakenError(f"flight {flight_id} is sold out")
        if not 0 <= seat < flight.total_seats:
            raise IndexError(f"seat {seat} out of range")
        if not flight.can_book(passenger.cmnd):
            raise AlreadyBookedError(passenger.cmnd)
        if flight.seats[seat] is not None:
            raise SeatTakenError(f"seat {seat} is taken")
        if has_departed(flight.date, flight.time, now):
            raise BookingExpiredError(flight_id)

        stored = self.passengers.search(passenger.cmnd)
        if stored is None:
            if not passenger.is_valid():
                raise ValueError("passenger details are incomplete")
            stored = passenger
            self.passengers.insert(stored)
        stored.number_of_tickets += 1
        flight.seats[seat] = stored.cmnd
        self._save_passenger(stored)
        if not flight.available_seats():
            flight.status = Status.SOLD_OUT
        self._save_flight(flight)
        return stored

    def cancel_ticket(self, flight_id: str, seat: int) -> str:
        """Free a booked seat; return the CMND of its former holder."""
        flight = self._require_flight(flight_id)
        if not 0 <= seat < flight.total_seats:
            raise IndexError(f"seat {seat} out of range")
        holder = flight.seats[seat]
        if holder is None:
            raise ValueError(f"seat {seat} is not booked")
        self._release_ticket(holder)
        flight.seats[seat] = None
        if flight.status is Status.SOLD_OUT:
            flight.status = Status.AVAILABLE
        self._save_flight(flight)
        return holder

    def cancel_passenger_ticket(self, flight_id: str, cmnd: str) -> int:
        """Free the seat ``cmnd`` holds on the flight; return its index."""
        flight = self._require_flight(flight_id)
        try:
            seat = flight.seats.index(cmnd)
        except ValueError:
            raise KeyError(cmnd) from None
        self.cancel_ticket(flight_id, seat)
        return seat

    def filter_flights(self, date_text: str = "", destination: str = "") -> list[Flight]:
        """Flights matching the date (dd/mm/yyyy) and destination; empty means any."""
        return [
            f
            for f in self.flights
            if (not date_text or str(f.date) == date_text)
            and (not destination or f.destination == destination)
        ]