# skyroster

A keyboard-driven terminal application for running a small airline. It
keeps a fleet of planes, schedules flights on them, sells seats to
passengers and stores everything as plain text files.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Running

```
skyroster
```

or, without installing the command:

```
python -m skyroster.app
```

Records are kept under `data/` in the current working directory. Use
`--data-dir` to keep them somewhere else:

```
skyroster --data-dir /path/to/records
```

The data directory holds three folders, which are created when they are
missing:

- `Planes/`: one file per plane, named `<plane id>.txt`
- `Flights/`: one file per flight, named `<flight id>.txt`
- `Passenger/`: one file per passenger, named `<CMND>.txt` (CMND is the
  ID card number)

The screen is drawn with ANSI escape sequences, so the program needs a
terminal that understands them.

## Using the program

Move with the arrow keys, confirm with Enter and leave a screen with Esc.
Left and Right turn the pages of a list. The first screen asks whether
you are a user or the manager. That screen has no exit key; stop the
program with Ctrl-C or by closing its input.

**User.** Type your ID card number (digits only). If it is already known
you go straight to the flight list. If not, fill in last name, first name
and gender (1 for male, 0 for female); the account is stored when you book
your first seat.

The flight list shows every flight with its plane, departure date and
time, destination and status. Below the list are two search fields,
departure date (`dd/mm/yyyy`; a one-digit day or month is padded with a
zero) and destination; press Enter in either field to apply both filters,
and leave a field empty to match everything. Pick a flight with Enter to
see its free seats and press Enter on a seat to book it. You cannot hold
two seats on the same flight, and flights that are sold out, cancelled or
have already departed cannot be booked.

**Manager.** The manager menu offers:

1. **Update Plane List.** The plane list. Press Tab for the plane menu:
   add, delete or edit a plane. A plane needs a type, at least 20 seats
   and a flights-performed count above zero. A plane still assigned to a
   flight cannot be deleted, and deleting asks for confirmation.
2. **Update Flight List.** The flight list with the same search fields.
   Press Tab for the flight menu:
   - *Update Flights*: create, reschedule or cancel a flight. A flight
     cannot be scheduled in the past, completed or cancelled flights
     cannot be rescheduled, and cancelling asks for confirmation.
   - *Print Passenger List for a Flight*: enter a flight ID to see who
     holds which seat. Enter cancels the ticket under the cursor; Tab asks
     for a CMND and cancels that passenger's ticket.
   - *View Available Seats for a Flight*: enter a flight ID to see its
     free seats.
3. **Flight Statistics.** Planes ordered by the number of flights they
   have performed, most first. Showing this list saves the new order of
   the planes.

Whenever the flight list is shown, flights whose departure time has
passed are marked completed and their plane's flight count goes up by
one. On the next start, cancelled and completed flights are deleted
together with their tickets; a passenger left with no tickets is deleted
as well.

## File formats

All files are plain text, one value per line.

- Plane: list position, plane ID, plane type, number of seats, flights
  performed.
- Flight: flight ID, plane ID, destination, date as `dd / mm / yyyy`,
  time as `hh : mm`, number of seats, status (`available`, `sold out`,
  `cancelled` or `completed`), then one `<seat index> <CMND>` line per
  booked seat, seats counted from 0.
- Passenger: CMND, last name, first name, gender (`1` male, `0` female),
  number of tickets held.

## Using the library

The booking rules can be used without the terminal screens:

```python
from datetime import datetime
from skyroster.models import DepartureDate, DepartureTime, Flight, Passenger, Plane
from skyroster.system import AirlineSystem

system = AirlineSystem("data")
system.load(datetime.now())

system.add_plane(Plane("VN101", "AIRBUS A321", 180, 1))
system.create_flight(
    Flight("VN2024", "VN101", "HANOI", DepartureDate(1, 1, 2099), DepartureTime(8, 30))
)
system.book_seat("VN2024", 0, Passenger("123456789", "NGUYEN", "AN", True))

for plane in system.planes_by_flights():
    print(plane.plane_id, plane.number_flights_performed)
```

Every change is written to the data directory at once. `AirlineSystem`
also offers `update_plane`, `delete_plane`, `update_flight`,
`cancel_flight`, `cancel_ticket`, `cancel_passenger_ticket`,
`filter_flights`, `refresh_flights` and the lookups `find_plane`,
`find_flight` and `find_passenger`.

Operations the rules forbid raise a subclass of
`skyroster.system.AirlineError`, for example `PlaneExistsError`,
`PlaneInUseError`, `FlightNotFoundError`, `DepartureInPastError`,
`SeatTakenError`, `AlreadyBookedError` or `BookingExpiredError`. Invalid
dates and times and incomplete passenger details raise `ValueError`; a
seat number out of range raises `IndexError`.

`skyroster.models` holds the records and their file forms (`dumps` and
`loads`), along with `valid_date`, `valid_time` and `has_departed`.
Passengers are kept in `skyroster.avl.AVLTree`, a balanced search tree
keyed by CMND.

## What it does not do

A user cannot list the tickets they hold or cancel their own booking;
tickets are cancelled only from the manager's passenger list. There is
no search by flight ID in the user's flight list, only by date and
destination.