"""Keyboard forms for adding and editing planes, flights and passenger details."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from .models import (
    LEN_CMND,
    LEN_DESTINATION,
    LEN_FIRST_NAME,
    LEN_FLIGHT_ID,
    LEN_LAST_NAME,
    LEN_PLANE_ID,
    LEN_PLANE_TYPE,
    MAX_PLANE,
    MIN_PLANE_SEATS,
    DepartureDate,
    DepartureTime,
    Flight,
    Passenger,
    Plane,
    has_departed,
    valid_date,
    valid_time,
)
from .system import (
    AirlineError,
    AirlineSystem,
    FlightAlreadyCancelledError,
    FlightNotCancellableError,
    FlightNotUpdatableError,
    PlaneListFullError,
)
from .terminal import (
    Key,
    KeyPress,
    Terminal,
    accept_date_char,
    accept_digit,
    accept_id_char,
    accept_name_char,
    accept_plane_type_char,
    accept_time_char,
    edit_field,
    normalize_date_text,
    normalize_time_text,
)

_NUMBER_FIELD_LEN = 5
_DATE_FIELD_LEN = 11
_TIME_FIELD_LEN = 6
_GENDER_FIELD_LEN = 2

_NAV_FOOTER = "[^] Move Up          [v] Move Down      [ESC] Exit"
_EXIT_FOOTER = "[ESC] Exit"

_PAST_MESSAGE = "INVALID TIME: CANNOT CREATE A FLIGHT IN THE PAST"


def _accept_gender(ch: str) -> Optional[str]:
    return ch if ch in ("0", "1") else None


@dataclass(frozen=True)
class _Field:
    label: str
    row: int
    value_x: int
    max_len: int
    accept: Callable[[str], Optional[str]]
    normalize: Optional[Callable[[str], str]] = None
    label_x: int = 42


class _Form:
    """A column of labelled input fields with one field in focus."""

    def __init__(
        self,
        terminal: Terminal,
        title: str,
        fields: Sequence[_Field],
        footer: str = _NAV_FOOTER,
    ) -> None:
        self.terminal = terminal
        self.title = title
        self.fields = list(fields)
        self.footer = footer
        self.values = [""] * len(self.fields)
        self.column = 0

    def draw(self) -> None:
        t = self.terminal
        t.clear()
        t.goto(42, 2)
        t.write(self.title)
        for fld, value in zip(self.fields, self.values):
            t.goto(fld.label_x, fld.row)
            t.write(fld.label)
            t.goto(fld.value_x, fld.row)
            t.write(value)
        t.goto(39, self.fields[-1].row + 3)
        t.write(self.footer)

    def reset(self) -> None:
        self.values = [""] * len(self.fields)
        self.column = 0

    def edit(self) -> KeyPress:
        fld = self.fields[self.column]
        value = self.values[self.column]
        self.terminal.goto(fld.value_x + len(value), fld.row)
        value, press = edit_field(self.terminal, value, fld.max_len, fld.accept)
        if fld.normalize is not None:
            normalized = fld.normalize(value)
            if normalized != value:
                self.terminal.goto(fld.value_x, fld.row)
                self.terminal.write(normalized)
                value = normalized
        self.values[self.column] = value
        return press

    def move(self, press: KeyPress) -> bool:
        """Move the focus for Up and Down; return True if the key was one of them."""
        if press.key is Key.UP:
            if self.column > 0:
                self.column -= 1
            return True
        if press.key is Key.DOWN:
            if self.column < len(self.fields) - 1:
                self.column += 1
            return True
        return False

    def notify(self, message: str) -> None:
        self.terminal.notify(message)
        self.draw()


def _parse_date(text: str) -> Optional[DepartureDate]:
    try:
        date = DepartureDate.parse(text)
    except ValueError:
        return None
    return date if valid_date(date.day, date.month, date.year) else None


def _parse_time(text: str) -> Optional[DepartureTime]:
    try:
        time = DepartureTime.parse(text)
    except ValueError:
        return None
    return time if valid_time(time.hour, time.minute) else None


def _number(text: str) -> int:
    return int(text) if text else 0


def _plane_fields(id_label: str, id_x: int) -> list[_Field]:
    return [
        _Field(id_label, 6, id_x, LEN_PLANE_ID, accept_id_char),
        _Field("Plane Type:", 9, 54, LEN_PLANE_TYPE, accept_plane_type_char),
        _Field("Number of Seats (>=20):", 12, 66, _NUMBER_FIELD_LEN, accept_digit),
        _Field("Flights Performed:", 15, 61, _NUMBER_FIELD_LEN, accept_digit),
    ]


def _plane_from(values: Sequence[str]) -> tuple[Plane, Optional[int]]:
    """Build a plane from form values; also return the first incomplete column."""
    plane_id, plane_type, seats, flights = values
    plane = Plane(plane_id, plane_type, _number(seats), _number(flights))
    if not plane.plane_type:
        return plane, 1
    if plane.number_of_seats < MIN_PLANE_SEATS:
        return plane, 2
    if plane.number_flights_performed <= 0:
        return plane, 3
    return plane, None


def plane_form(terminal: Terminal, system: AirlineSystem) -> list[Plane]:
    """Add planes until Esc is pressed; return the planes added."""
    added: list[Plane] = []
    if len(system.planes) >= MAX_PLANE:
        terminal.notify("THE PLANE LIST IS FULL")
        return added
    form = _Form(terminal, "ADD NEW PLANE", _plane_fields("Plane ID:", 52))
    form.draw()
    while True:
        press = form.edit()
        if press.key is Key.ESC:
            return added
        if form.move(press) or press.key is not Key.ENTER:
            continue
        plane, missing = _plane_from(form.values)
        if system.find_plane(plane.plane_id) is not None:
            form.column = 0
            form.notify("PLANE ID ALREADY EXISTS")
            continue
        if not plane.plane_id:
            form.column = 0
            continue
        if missing is not None:
            form.column = missing
            continue
        try:
            added.append(system.add_plane(plane))
        except PlaneListFullError:
            terminal.notify("THE PLANE LIST IS FULL")
            return added
        form.reset()
        form.notify("SUCCESSFULLY ADDED PLANE")


def plane_update_form(terminal: Terminal, system: AirlineSystem) -> list[Plane]:
    """Edit existing planes until Esc is pressed; return the planes updated."""
    updated: list[Plane] = []
    if not system.planes:
        terminal.notify("THE PLANE LIST IS EMPTY")
        return updated
    form = _Form(
        terminal, "EDIT PLANE DETAILS", _plane_fields("Enter Plane ID to edit:", 66)
    )
    form.draw()
    while True:
        press = form.edit()
        if press.key is Key.ESC:
            return updated
        if form.move(press) or press.key is not Key.ENTER:
            continue
        plane, missing = _plane_from(form.values)
        if system.find_plane(plane.plane_id) is None:
            form.notify("PLANE ID NOT FOUND")
            continue
        if missing is not None:
            form.column = missing
            continue
        updated.append(system.update_plane(plane))
        form.reset()
        form.notify("SUCCESSFULLY UPDATED PLANE")


def plane_delete_form(terminal: Terminal, system: AirlineSystem) -> Optional[str]:
    """Ask for a plane ID and delete that plane after confirmation.

    Returns the deleted plane's ID, or None if nothing was deleted.
    """
    if not system.planes:
        terminal.notify("THE PLANE LIST IS EMPTY")
        return None
    form = _Form(
        terminal,
        "DELETE PLANE",
        [_Field("Enter Plane ID to delete:", 6, 69, LEN_PLANE_ID, accept_id_char, label_x=43)],
        footer=_EXIT_FOOTER,
    )
    form.draw()
    while True:
        press = form.edit()
        if press.key is Key.ESC:
            return None
        if press.key is not Key.ENTER:
            continue
        plane_id = form.values[0]
        if system.find_plane(plane_id) is None:
            form.notify("PLANE ID NOT FOUND")
            continue
        if any(f.plane_id == plane_id for f in system.flights):
            terminal.notify("PLANE IN USE BY FLIGHTS - CANNOT DELETE PLANE")
            return None
        if not terminal.confirm("NO FLIGHTS USE THIS PLANE - DELETE ANYWAY ?"):
            return None
        try:
            system.delete_plane(plane_id)
        except AirlineError:
            terminal.notify("PLANE ID NOT FOUND")
            return None
        terminal.notify("SUCCESSFULLY DELETED PLANE")
        return plane_id


def flight_form(
    terminal: Terminal, system: AirlineSystem, now: Optional[datetime] = None
) -> list[Flight]:
    """Create flights until Esc is pressed; return the flights created."""
    created: list[Flight] = []
    form = _Form(
        terminal,
        "CREATE NEW FLIGHT",
        [
            _Field("Flight ID:", 6, 53, LEN_FLIGHT_ID, accept_id_char),
            _Field("Plane ID:", 9, 52, LEN_PLANE_ID, accept_id_char),
            _Field(
                "Departure Date (dd/mm/yyyy):", 12, 71, _DATE_FIELD_LEN,
                accept_date_char, normalize_date_text,
            ),
            _Field(
                "Departure Time (hh:mm):", 15, 66, _TIME_FIELD_LEN,
                accept_time_char, normalize_time_text,
            ),
            _Field("Destination:", 18, 55, LEN_DESTINATION, accept_name_char),
        ],
    )
    form.draw()
    while True:
        press = form.edit()
        if press.key is Key.ESC:
            return created
        if form.move(press) or press.key is not Key.ENTER:
            continue
        flight_id, plane_id, date_text, time_text, destination = form.values
        if form.column == 0:
            if system.find_flight(flight_id) is not None:
                form.notify("FLIGHT ID ALREADY EXISTS")
            else:
                form.column += 1
            continue
        if form.column == 1:
            if system.find_plane(plane_id) is None:
                form.notify("PLANE ID NOT FOUND")
            else:
                form.column += 1
            continue
        if form.column < len(form.fields) - 1:
            form.column += 1
            continue
        if system.find_flight(flight_id) is not None:
            form.notify("FLIGHT ID ALREADY EXISTS")
            continue
        if system.find_plane(plane_id) is None:
            form.notify("PLANE ID NOT FOUND")
            continue
        if not flight_id:
            form.column = 0
            continue
        if not destination:
            continue
        date = _parse_date(date_text)
        if date is None:
            form.column = 2
            continue
        time = _parse_time(time_text)
        if time is None:
            form.column = 3
            continue
        if has_departed(date, time, now):
            form.column = 2
            form.notify(_PAST_MESSAGE)
            continue
        flight = Flight(flight_id, plane_id, destination, date, time)
        created.append(system.create_flight(flight, now))
        form.reset()
        form.notify("SUCCESSFULLY CREATED FLIGHT")


def flight_update_form(
    terminal: Terminal, system: AirlineSystem, now: Optional[datetime] = None
) -> list[Flight]:
    """Reschedule flights until Esc is pressed; return the flights updated."""
    updated: list[Flight] = []
    if not system.flights:
        terminal.notify("THE FLIGHT LIST IS EMPTY")
        return updated
    form = _Form(
        terminal,
        "EDIT FLIGHT SCHEDULE",
        [
            _Field("Enter Flight ID:", 6, 59, LEN_FLIGHT_ID, accept_id_char),
            _Field(
                "New Departure Date (dd/mm/yyyy):", 9, 75, _DATE_FIELD_LEN,
                accept_date_char, normalize_date_text,
            ),
            _Field(
                "New Departure Time (hh:mm):", 12, 70, _TIME_FIELD_LEN,
                accept_time_char, normalize_time_text,
            ),
        ],
    )
    form.draw()
    while True:
        press = form.edit()
        if press.key is Key.ESC:
            return updated
        if form.move(press) or press.key is not Key.ENTER:
            continue
        flight_id, date_text, time_text = form.values
        if system.find_flight(flight_id) is None:
            form.notify("FLIGHT NOT FOUND")
            continue
        date = _parse_date(date_text)
        if date is None:
            form.column = 1
            continue
        time = _parse_time(time_text)
        if time is None:
            form.column = 2
            continue
        if has_departed(date, time, now):
            form.column = 1
            form.notify(_PAST_MESSAGE)
            continue
        try:
            updated.append(system.update_flight(flight_id, date, time, now))
        except FlightNotUpdatableError:
            form.notify("CAN NOT UPDATE FLIGHT")
            continue
        form.reset()
        form.notify("SUCCESSFULLY UPDATED FLIGHT")


def flight_cancel_form(terminal: Terminal, system: AirlineSystem) -> list[str]:
    """Cancel flights by ID until Esc is pressed; return the IDs cancelled."""
    cancelled: list[str] = []
    if not system.flights:
        terminal.notify("THE FLIGHT LIST IS EMPTY")
        return cancelled
    form = _Form(
        terminal,
        "CANCEL FLIGHT",
        [_Field("Enter Flight ID:", 6, 59, LEN_FLIGHT_ID, accept_id_char)],
        footer=_EXIT_FOOTER,
    )
    form.draw()
    while True:
        press = form.edit()
        if press.key is Key.ESC:
            return cancelled
        if press.key is not Key.ENTER:
            continue
        flight_id = form.values[0]
        if system.find_flight(flight_id) is None:
            form.notify("FLIGHT NOT FOUND")
            continue
        if not terminal.confirm("CONFIRM CANCEL FLIGHT ?"):
            form.draw()
            continue
        try:
            system.cancel_flight(flight_id)
        except FlightNotCancellableError:
            form.notify("THIS FLIGHT CANNOT CANCEL")
            continue
        except FlightAlreadyCancelledError:
            form.notify("FLIGHT ALREADY CANCELLED")
            continue
        cancelled.append(flight_id)
        form.reset()
        form.notify("SUCCESSFULLY CANCELLED FLIGHT")


def _cmnd_field() -> _Field:
    return _Field("Enter CMND:", 6, 55, LEN_CMND, accept_digit)


def user_form(terminal: Terminal, system: AirlineSystem) -> Optional[Passenger]:
    """Identify the user by CMND, asking for details if the CMND is new.

    Returns the stored passenger for a known CMND, a new complete passenger
    (not yet stored) otherwise, or None if the user leaves with Esc.
    """
    lookup = _Form(terminal, "ENTER USER INFORMATION", [_cmnd_field()], footer=_EXIT_FOOTER)
    lookup.draw()
    while True:
        press = lookup.edit()
        if press.key is Key.ESC:
            return None
        if press.key is Key.ENTER and lookup.values[0]:
            break
    cmnd = lookup.values[0]
    stored = system.find_passenger(cmnd)
    if stored is not None:
        terminal.notify("THIS CMND ALREADY EXISTS IN THE PASSENGER LIST")
        return stored
    terminal.notify("USER DOES NOT EXIST. PLEASE CREATE AN ACCOUNT")

    form = _Form(
        terminal,
        "ENTER USER INFORMATION",
        [
            _cmnd_field(),
            _Field("Enter Last Name:", 9, 60, LEN_LAST_NAME, accept_name_char),
            _Field("Enter First Name:", 12, 61, LEN_FIRST_NAME, accept_name_char),
            _Field(
                "Enter Gender (Male: 1, Female: 0):", 15, 78,
                _GENDER_FIELD_LEN, _accept_gender,
            ),
        ],
    )
    form.values[0] = cmnd
    form.column = 1
    form.draw()
    while True:
        press = form.edit()
        if press.key is Key.ESC:
            return None
        if form.move(press) or press.key is not Key.ENTER:
            continue
        if form.column == 0:
            cmnd = form.values[0]
            if not cmnd:
                continue
            stored = system.find_passenger(cmnd)
            if stored is not None:
                terminal.notify("THIS CMND ALREADY EXISTS IN THE PASSENGER LIST")
                return stored
            form.column += 1
            continue
        if form.column < len(form.fields) - 1:
            form.column += 1
            continue
        cmnd, last_name, first_name, gender = form.values
        passenger = Passenger(
            cmnd=cmnd,
            last_name=last_name,
            first_name=first_name,
            gender=(gender == "1") if gender else None,
        )
        if passenger.is_valid():
            terminal.notify("ACCOUNT CREATED SUCCESSFULLY")
            return passenger