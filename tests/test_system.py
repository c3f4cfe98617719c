from datetime import datetime

import pytest

from skyroster.models import (
    MAX_PLANE,
    DepartureDate,
    DepartureTime,
    Flight,
    Passenger,
    Plane,
    Status,
)
from skyroster.system import (
    AirlineSystem,
    AlreadyBookedError,
    BookingExpiredError,
    DepartureInPastError,
    FlightAlreadyCancelledError,
    FlightExistsError,
    FlightNotCancellableError,
    FlightNotFoundError,
    FlightNotUpdatableError,
    PlaneExistsError,
    PlaneInUseError,
    PlaneListFullError,
    PlaneNotFoundError,
    SeatTakenError,
)

NOW = datetime(2024, 1, 1, 12, 0)
LATER = datetime(2031, 1, 1)
FUTURE = DepartureDate(15, 6, 2030)
AT = DepartureTime(9, 30)


def make_flight(flight_id, plane_id="VN1", destination="HANOI", date=FUTURE):
    return Flight(flight_id, plane_id, destination, date, AT)


def person(cmnd, gender=True):
    return Passenger(cmnd=cmnd, last_name="NGUYEN", first_name="AN", gender=gender)


@pytest.fixture
def system(tmp_path):
    sys_ = AirlineSystem(tmp_path)
    sys_.load(NOW)
    sys_.add_plane(Plane("VN1", "AIRBUS A321", 3, 5))
    return sys_


def test_add_plane_writes_file(system, tmp_path):
    index, plane = Plane.loads((tmp_path / "Planes" / "VN1.txt").read_text())
    assert index == 0
    assert plane == system.find_plane("VN1")


def test_add_duplicate_plane(system):
    with pytest.raises(PlaneExistsError):
        system.add_plane(Plane("VN1", "BOEING", 30, 1))


def test_plane_list_full(tmp_path):
    sys_ = AirlineSystem(tmp_path)
    for i in range(MAX_PLANE):
        sys_.add_plane(Plane(f"P{i}", "T", 20, 1))
    with pytest.raises(PlaneListFullError):
        sys_.add_plane(Plane("EXTRA", "T", 20, 1))


def test_update_plane(system, tmp_path):
    system.update_plane(Plane("VN1", "BOEING 787", 40, 9))
    _, plane = Plane.loads((tmp_path / "Planes" / "VN1.txt").read_text())
    assert plane.plane_type == "BOEING 787"
    assert plane.number_of_seats == 40
    with pytest.raises(PlaneNotFoundError):
        system.update_plane(Plane("NOPE", "X", 20, 1))


def test_delete_plane_shifts_indices(system, tmp_path):
    system.add_plane(Plane("VN2", "T", 20, 1))
    system.add_plane(Plane("VN3", "T", 20, 1))
    system.delete_plane("VN1")
    assert [p.plane_id for p in system.planes] == ["VN2", "VN3"]
    assert not (tmp_path / "Planes" / "VN1.txt").exists()
    index, _ = Plane.loads((tmp_path / "Planes" / "VN3.txt").read_text())
    assert index == 1
    with pytest.raises(PlaneNotFoundError):
        system.delete_plane("VN1")


def test_delete_plane_in_use(system):
    system.create_flight(make_flight("F1"), NOW)
    with pytest.raises(PlaneInUseError):
        system.delete_plane("VN1")


def test_planes_by_flights(system):
    system.add_plane(Plane("A", "T", 20, 9))
    system.add_plane(Plane("B", "T", 20, 5))
    ordered = system.planes_by_flights()
    counts = [p.number_flights_performed for p in ordered]
    assert counts == sorted(counts, reverse=True)
    assert [p.plane_id for p in ordered] == ["A", "B", "VN1"]
    assert system.planes == ordered


def test_create_flight(system, tmp_path):
    system.create_flight(make_flight("F2"), NOW)
    created = system.create_flight(make_flight("F1"), NOW)
    assert created.total_seats == 3
    assert created.status is Status.AVAILABLE
    assert [f.flight_id for f in system.flights] == ["F1", "F2"]
    stored = Flight.loads((tmp_path / "Flights" / "F1.txt").read_text())
    assert stored == created


def test_create_flight_errors(system):
    system.create_flight(make_flight("F1"), NOW)
    with pytest.raises(FlightExistsError):
        system.create_flight(make_flight("F1"), NOW)
    with pytest.raises(PlaneNotFoundError):
        system.create_flight(make_flight("F2", plane_id="NOPE"), NOW)
    with pytest.raises(DepartureInPastError):
        system.create_flight(make_flight("F3", date=DepartureDate(1, 1, 2020)), NOW)
    with pytest.raises(ValueError):
        system.create_flight(make_flight("F4", date=DepartureDate(30, 2, 2030)), NOW)


def test_book_seat(system, tmp_path):
    system.create_flight(make_flight("F1"), NOW)
    stored = system.book_seat("F1", 1, person("123"), NOW)
    assert stored.number_of_tickets == 1
    assert system.find_passenger("123") is stored
    assert system.find_flight("F1").seats[1] == "123"
    on_disk = Passenger.loads((tmp_path / "Passenger" / "123.txt").read_text())
    assert on_disk == stored
    with pytest.raises(AlreadyBookedError):
        system.book_seat("F1", 0, person("123"), NOW)
    with pytest.raises(SeatTakenError):
        system.book_seat("F1", 1, person("456"), NOW)


def test_booking_fills_flight(system):
    system.create_flight(make_flight("F1"), NOW)
    for seat, cmnd in enumerate(["1", "2", "3"]):
        system.book_seat("F1", seat, person(cmnd), NOW)
    assert system.find_flight("F1").status is Status.SOLD_OUT
    with pytest.raises(SeatTakenError):
        system.book_seat("F1", 0, person("4"), NOW)


def test_booking_after_departure(system):
    system.create_flight(make_flight("F1"), NOW)
    with pytest.raises(BookingExpiredError):
        system.book_seat("F1", 0, person("1"), LATER)
    with pytest.raises(FlightNotFoundError):
        system.book_seat("NOPE", 0, person("1"), NOW)


def test_cancel_ticket_releases_passenger(system, tmp_path):
    system.create_flight(make_flight("F1"), NOW)
    for seat, cmnd in enumerate(["1", "2", "3"]):
        system.book_seat("F1", seat, person(cmnd), NOW)
    assert system.cancel_ticket("F1", 2) == "3"
    flight = system.find_flight("F1")
    assert flight.status is Status.AVAILABLE
    assert flight.seats[2] is None
    assert "3" not in system.passengers
    assert not (tmp_path / "Passenger" / "3.txt").exists()
    with pytest.raises(ValueError):
        system.cancel_ticket("F1", 2)


def test_cancel_passenger_ticket(system):
    system.create_flight(make_flight("F1"), NOW)
    system.create_flight(make_flight("F2"), NOW)
    system.book_seat("F1", 2, person("77"), NOW)
    system.book_seat("F2", 0, person("77"), NOW)
    assert system.cancel_passenger_ticket("F1", "77") == 2
    assert system.find_passenger("77").number_of_tickets == 1
    with pytest.raises(KeyError):
        system.cancel_passenger_ticket("F1", "77")


def test_cancel_flight(system):
    system.create_flight(make_flight("F1"), NOW)
    assert system.cancel_flight("F1").status is Status.CANCELLED
    with pytest.raises(FlightAlreadyCancelledError):
        system.cancel_flight("F1")
    with pytest.raises(FlightNotUpdatableError):
        system.update_flight("F1", FUTURE, DepartureTime(10, 0), NOW)
    with pytest.raises(FlightNotFoundError):
        system.cancel_flight("NOPE")


def test_update_flight(system, tmp_path):
    system.create_flight(make_flight("F1"), NOW)
    new_date = DepartureDate(1, 7, 2030)
    system.update_flight("F1", new_date, AT, NOW)
    stored = Flight.loads((tmp_path / "Flights" / "F1.txt").read_text())
    assert stored.date == new_date
    with pytest.raises(DepartureInPastError):
        system.update_flight("F1", DepartureDate(1, 1, 2020), AT, NOW)


def test_completed_flight_cannot_be_cancelled(system):
    system.create_flight(make_flight("F1"), NOW)
    system.refresh_flights(LATER)
    assert system.find_flight("F1").status is Status.COMPLETED
    assert system.find_plane("VN1").number_flights_performed == 6
    with pytest.raises(FlightNotCancellableError):
        system.cancel_flight("F1")


def test_reload_round_trip(system, tmp_path):
    system.create_flight(make_flight("F1"), NOW)
    system.book_seat("F1", 0, person("42", gender=False), NOW)
    fresh = AirlineSystem(tmp_path)
    fresh.load(NOW)
    assert fresh.flights == system.flights
    assert fresh.planes == system.planes
    assert list(fresh.passengers) == list(system.passengers)


def test_load_completes_then_drops_departed_flight(system, tmp_path):
    system.create_flight(make_flight("F1"), NOW)
    system.book_seat("F1", 0, person("42"), NOW)
    first = AirlineSystem(tmp_path)
    first.load(LATER)
    assert first.find_flight("F1").status is Status.COMPLETED
    assert first.find_plane("VN1").number_flights_performed == 6
    second = AirlineSystem(tmp_path)
    second.load(LATER)
    assert second.flights == []
    assert second.find_passenger("42") is None
    assert not (tmp_path / "Flights" / "F1.txt").exists()


def test_filter_flights(system):
    system.create_flight(make_flight("F1", destination="HANOI"), NOW)
    system.create_flight(make_flight("F2", destination="HUE"), NOW)
    other_day = DepartureDate(2, 6, 2030)
    system.create_flight(make_flight("F3", destination="HUE", date=other_day), NOW)
    assert len(system.filter_flights()) == 3
    assert [f.flight_id for f in system.filter_flights("", "HUE")] == ["F2", "F3"]
    assert [f.flight_id for f in system.filter_flights(str(FUTURE), "HUE")] == ["F2"]