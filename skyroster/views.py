"""Paged, keyboard-driven lists of planes, flights, passengers and free seats."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from .models import (
    FLIGHTS_PER_PAGE,
    LEN_CMND,
    LEN_DESTINATION,
    PASSENGERS_PER_PAGE,
    PLANES_PER_PAGE,
    SEATS_PER_PAGE,
    Flight,
    Passenger,
    Plane,
    Status,
)
from .system import AirlineError, AirlineSystem, BookingExpiredError
from .terminal import (
    Key,
    Terminal,
    accept_date_char,
    accept_name_char,
    edit_field,
    normalize_date_text,
)

_DATE_FIELD_LEN = 11

_STATUS_BLOCKS = {
    Status.CANCELLED: "THIS FLIGHT IS CANCELLED",
    Status.SOLD_OUT: "THIS FLIGHT IS SOLD OUT",
    Status.COMPLETED: "THIS FLIGHT IS COMPLETED",
}


def page_count(total: int, per_page: int) -> int:
    """Number of pages needed to show ``total`` rows, ``per_page`` at a time."""
    return -(-total // per_page)


def _frame(terminal: Terminal, title: str, *columns: tuple[str, int]) -> None:
    terminal.clear()
    terminal.goto(24, 2)
    terminal.write(title)
    for label, x in columns:
        terminal.goto(x, 5)
        terminal.write(label)


def _cells(terminal: Terminal, y: int, *cells: tuple[int, str]) -> None:
    for x, text in cells:
        terminal.goto(x, y)
        terminal.write(text)


def _cursor(terminal: Terminal, x: int, y: int, visible: bool = True) -> None:
    terminal.goto(x, y)
    terminal.write(">>" if visible else "  ")
    terminal.goto(0, 0)


def _instructions(
    terminal: Terminal, y: int, page: int, pages: int, with_tab: bool = False, extra: str = ""
) -> None:
    pad = " " * 32
    terminal.goto(0, y)
    terminal.write(
        f"\n{pad}[<] Previous Page    [>] Next Page    [ESC] Exit     Page: {page}|{pages}\n"
    )
    tail = "    [TAB] Show Functions" if with_tab else ""
    terminal.write(f"{pad}[^] Move Up          [v] Move Down{tail}\n")
    if extra:
        terminal.write(f"{pad}{extra}\n")


def _flight_header(terminal: Terminal, flight: Flight, title: str) -> None:
    terminal.clear()
    terminal.goto(24, 2)
    terminal.write(f"{title} {flight.flight_id}")
    _cells(
        terminal,
        5,
        (26, f"Plane ID: {flight.plane_id}"),
        (66, f"Destination: {flight.destination}"),
    )
    _cells(
        terminal,
        7,
        (26, f"Departure Date: {flight.date}"),
        (66, f"Time: {flight.time}"),
    )
    _cells(terminal, 9, (26, f"Status: {flight.status.label.title()}"))


def browse_planes(
    terminal: Terminal,
    system: AirlineSystem,
    on_tab: Optional[Callable[[], None]] = None,
) -> None:
    """Page through the plane list; Tab runs ``on_tab`` and Esc leaves."""
    page = row = 0
    while True:
        planes = system.planes
        pages = page_count(len(planes), PLANES_PER_PAGE)
        shown = planes[page * PLANES_PER_PAGE:(page + 1) * PLANES_PER_PAGE]
        _frame(
            terminal,
            "PLANE LIST",
            ("Plane ID", 27),
            ("Plane Type", 50),
            ("Number Of Seats", 93),
        )
        for i, plane in enumerate(shown):
            _cells(
                terminal,
                7 + i,
                (27, plane.plane_id),
                (50, plane.plane_type),
                (93, str(plane.number_of_seats)),
            )
        _instructions(terminal, 7 + PLANES_PER_PAGE, page + 1, pages, with_tab=True)
        while True:
            _cursor(terminal, 24, 7 + row)
            press = terminal.read_key()
            if press.key is Key.UP and row > 0:
                _cursor(terminal, 24, 7 + row, False)
                row -= 1
            elif press.key is Key.DOWN and row < len(shown) - 1:
                _cursor(terminal, 24, 7 + row, False)
                row += 1
            elif press.key is Key.RIGHT and page < pages - 1:
                page, row = page + 1, 0
                break
            elif press.key is Key.LEFT and page > 0:
                page, row = page - 1, 0
                break
            elif press.key is Key.TAB and on_tab is not None:
                on_tab()
                page = row = 0
                break
            elif press.key is Key.ESC:
                return


def show_plane_statistics(terminal: Terminal, system: AirlineSystem) -> list[Plane]:
    """Show planes ordered by flights performed, most first; return that order."""
    planes = system.planes_by_flights()
    if not planes:
        terminal.notify("THE PLANE LIST IS EMPTY")
        return []
    pages = page_count(len(planes), PLANES_PER_PAGE)
    page = row = 0
    while True:
        shown = planes[page * PLANES_PER_PAGE:(page + 1) * PLANES_PER_PAGE]
        _frame(
            terminal,
            "PLANE FLIGHT PERFORMANCE STATS",
            ("Plane ID", 27),
            ("Plane Type", 50),
            ("Number Flights Performed", 93),
        )
        for i, plane in enumerate(shown):
            _cells(
                terminal,
                7 + i,
                (27, plane.plane_id),
                (50, plane.plane_type),
                (93, str(plane.number_flights_performed)),
            )
        _instructions(terminal, 7 + PLANES_PER_PAGE, page + 1, pages)
        while True:
            _cursor(terminal, 24, 7 + row)
            press = terminal.read_key()
            if press.key is Key.UP and row > 0:
                _cursor(terminal, 24, 7 + row, False)
                row -= 1
            elif press.key is Key.DOWN and row < len(shown) - 1:
                _cursor(terminal, 24, 7 + row, False)
                row += 1
            elif press.key is Key.RIGHT and page < pages - 1:
                page, row = page + 1, 0
                break
            elif press.key is Key.LEFT and page > 0:
                page, row = page - 1, 0
                break
            elif press.key is Key.ESC:
                return planes


def _prompt_cmnd(terminal: Terminal) -> Optional[str]:
    terminal.clear()
    terminal.goto(40, 2)
    terminal.write("DELETE PASSENGER")
    terminal.goto(42, 6)
    terminal.write("Enter CMND to delete: ")
    text = ""
    while True:
        terminal.goto(65 + len(text), 6)
        text, press = edit_field(terminal, text, LEN_CMND, lambda c: c)
        if press.key is Key.ENTER:
            return text
        if press.key in (Key.ESC, Key.TAB):
            return None


def browse_passengers(
    terminal: Terminal, system: AirlineSystem, flight: Flight
) -> list[str]:
    """List the passengers of a flight; Enter or Tab cancels a ticket.

    Returns the CMNDs whose tickets were cancelled, in order.
    """
    cancelled: list[str] = []
    seats = flight.passenger_seats()
    if not seats:
        terminal.notify("NO PASSENGERS HAVE BOOKED SEATS ON THIS FLIGHT")
        return cancelled
    page = row = 0
    while True:
        pages = page_count(len(seats), PASSENGERS_PER_PAGE)
        start = page * PASSENGERS_PER_PAGE
        shown = seats[start:start + PASSENGERS_PER_PAGE]
        _flight_header(terminal, flight, "PASSENGER LIST FOR FLIGHT ID:")
        _cells(
            terminal,
            11,
            (27, "Last Name"),
            (45, "First Name"),
            (64, "CMND"),
            (83, "Gender"),
            (94, "Seat No."),
        )
        for i, seat in enumerate(shown):
            holder = flight.seats[seat] or ""
            person = system.find_passenger(holder)
            if person is None:
                person = Passenger(cmnd=holder)
            gender = "" if person.gender is None else ("Male" if person.gender else "Female")
            _cells(
                terminal,
                13 + i,
                (27, person.last_name),
                (45, person.first_name),
                (64, person.cmnd),
                (83, gender),
                (94, str(seat + 1)),
            )
        _instructions(
            terminal,
            13 + PASSENGERS_PER_PAGE,
            page + 1,
            pages,
            extra="[Enter] Cancel Ticket    [TAB] Cancel by CMND",
        )
        while True:
            _cursor(terminal, 22, 13 + row)
            press = terminal.read_key()
            if press.key is Key.ESC:
                return cancelled
            if press.key is Key.LEFT and page > 0:
                page, row = page - 1, 0
                break
            if press.key is Key.RIGHT and page < pages - 1:
                page, row = page + 1, 0
                break
            if press.key is Key.UP and row > 0:
                _cursor(terminal, 22, 13 + row, False)
                row -= 1
            elif press.key is Key.DOWN:
                _cursor(terminal, 22, 13 + row, False)
                if row < len(shown) - 1:
                    row += 1
            elif press.key in (Key.ENTER, Key.TAB):
                if press.key is Key.ENTER:
                    cancelled.append(system.cancel_ticket(flight.flight_id, shown[row]))
                else:
                    cmnd = _prompt_cmnd(terminal)
                    if cmnd is not None:
                        try:
                            system.cancel_passenger_ticket(flight.flight_id, cmnd)
                        except KeyError:
                            terminal.notify("NO PASSENGERS HAVE BOOKED SEATS ON THIS FLIGHT")
                        else:
                            cancelled.append(cmnd)
                seats = flight.passenger_seats()
                if not seats:
                    terminal.notify("NO PASSENGERS HAVE BOOKED SEATS ON THIS FLIGHT")
                    return cancelled
                page = row = 0
                break


def browse_available_seats(
    terminal: Terminal,
    system: AirlineSystem,
    flight: Flight,
    passenger: Optional[Passenger] = None,
    now: Optional[datetime] = None,
) -> Optional[int]:
    """List the free seats of a flight; with a passenger, Enter books one.

    Returns the index of the booked seat, or None if nothing was booked.
    """
    _flight_header(terminal, flight, "AVAILABLE TICKETS FOR FLIGHT ID:")
    if flight.status in _STATUS_BLOCKS:
        terminal.goto(53, 15)
        terminal.notify(_STATUS_BLOCKS[flight.status])
        return None
    seats = flight.available_seats()
    pages = page_count(len(seats), SEATS_PER_PAGE)
    page = row = 0
    while True:
        start = page * SEATS_PER_PAGE
        shown = seats[start:start + SEATS_PER_PAGE]
        _flight_header(terminal, flight, "AVAILABLE TICKETS FOR FLIGHT ID:")
        _cells(terminal, 11, (28, "Seat Number"), (69, "Status"))
        for i, seat in enumerate(shown):
            state = "SOLD OUT" if flight.seats[seat] is not None else "AVAILABLE"
            _cells(terminal, 13 + i, (30, str(seat + 1)), (69, state))
        _instructions(terminal, 13 + SEATS_PER_PAGE, page + 1, pages)
        while True:
            _cursor(terminal, 26, 13 + row)
            press = terminal.read_key()
            if press.key is Key.ESC:
                return None
            if press.key is Key.LEFT and page > 0:
                page, row = page - 1, 0
                break
            if press.key is Key.RIGHT and page < pages - 1:
                page, row = page + 1, 0
                break
            if press.key is Key.UP and row > 0:
                _cursor(terminal, 26, 13 + row, False)
                row -= 1
            elif press.key is Key.DOWN and row < len(shown) - 1:
                _cursor(terminal, 26, 13 + row, False)
                row += 1
            elif press.key is Key.ENTER and passenger is not None and shown:
                seat = shown[row]
                if flight.seats[seat] is not None:
                    continue
                try:
                    system.book_seat(flight.flight_id, seat, passenger, now)
                except BookingExpiredError:
                    terminal.notify("BOOKING TIME HAS EXPIRED")
                    return None
                except (AirlineError, ValueError) as exc:
                    terminal.notify(str(exc).upper())
                    return None
                terminal.notify("TICKET BOOKED SUCCESSFULLY")
                return seat


def browse_flights(
    terminal: Terminal,
    system: AirlineSystem,
    passenger: Optional[Passenger] = None,
    on_tab: Optional[Callable[[], None]] = None,
    now: Optional[datetime] = None,
) -> None:
    """Page through flights, filter them by date and destination, open one's seats.

    Without a passenger the list is the manager's view and Tab runs ``on_tab``.
    """
    system.refresh_flights(now)
    date_text = destination = ""
    active_date = active_destination = ""
    page = row = 0
    while True:
        flights = system.filter_flights(active_date, active_destination)
        pages = page_count(len(flights), FLIGHTS_PER_PAGE)
        shown = flights[page * FLIGHTS_PER_PAGE:(page + 1) * FLIGHTS_PER_PAGE]
        _frame(
            terminal,
            "FLIGHT LIST",
            ("Flight ID", 26),
            ("Plane ID", 43),
            ("Dep Date & Time", 62),
            ("Destination", 80),
            ("Status", 99),
        )
        for i, flight in enumerate(shown):
            _cells(
                terminal,
                7 + i,
                (26, flight.flight_id),
                (43, flight.plane_id),
                (62, f"{flight.date}|{flight.time}"),
                (80, flight.destination),
                (99, flight.status.label),
            )
        date_row = len(shown) + 8
        dest_row = date_row + 2
        _cells(
            terminal,
            date_row,
            (26, "SEARCH FLIGHT"),
            (43, "Date of Dep (dd/mm/yyyy):"),
            (70, date_text),
        )
        _cells(terminal, dest_row, (43, "Destination:"), (74, destination))
        _instructions(
            terminal, dest_row + 1, page + 1, pages, with_tab=passenger is None
        )
        while True:
            if row == len(shown):
                terminal.goto(70 + len(date_text), date_row)
                date_text, press = edit_field(
                    terminal, date_text, _DATE_FIELD_LEN, accept_date_char
                )
                date_text = normalize_date_text(date_text)
            elif row == len(shown) + 1:
                terminal.goto(74 + len(destination), dest_row)
                destination, press = edit_field(
                    terminal, destination, LEN_DESTINATION, accept_name_char
                )
            else:
                _cursor(terminal, 22, 7 + row)
                press = terminal.read_key()

            if press.key is Key.UP and row > 0:
                if row < len(shown):
                    _cursor(terminal, 22, 7 + row, False)
                row -= 1
            elif press.key is Key.DOWN and row + 1 < len(shown) + 2:
                if row < len(shown):
                    _cursor(terminal, 22, 7 + row, False)
                row += 1
            elif press.key is Key.RIGHT and page < pages - 1:
                page, row = page + 1, 0
                break
            elif press.key is Key.LEFT and page > 0:
                page, row = page - 1, 0
                break
            elif press.key is Key.ESC:
                return
            elif press.key is Key.ENTER:
                if row >= len(shown):
                    active_date, active_destination = date_text, destination
                    page = row = 0
                    break
                selected = shown[row]
                if passenger is None or selected.can_book(passenger.cmnd):
                    browse_available_seats(terminal, system, selected, passenger, now)
                    system.refresh_flights(now)
                else:
                    terminal.notify("YOU HAVE ALREADY BOOKED A TICKET FOR THIS FLIGHT")
                break
            elif press.key is Key.TAB and passenger is None and on_tab is not None:
                on_tab()
                system.refresh_flights(now)
                break