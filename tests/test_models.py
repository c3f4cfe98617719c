from datetime import datetime

import pytest

from skyroster.models import (
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


def make_flight(seats=None, status=Status.AVAILABLE):
    return Flight(
        flight_id="VN100",
        plane_id="A321",
        destination="HA NOI",
        date=DepartureDate(5, 3, 2025),
        time=DepartureTime(9, 5),
        status=status,
        seats=seats if seats is not None else [None, "111", None, "222"],
    )


@pytest.mark.parametrize(
    "day,month,year,expected",
    [
        (29, 2, 2024, True),
        (29, 2, 2023, False),
        (29, 2, 2000, True),
        (29, 2, 2100, False),
        (31, 4, 2025, False),
        (31, 12, 2025, True),
        (1, 1, 1900, False),
        (0, 5, 2025, False),
        (1, 13, 2025, False),
    ],
)
def test_valid_date(day, month, year, expected):
    assert valid_date(day, month, year) is expected


@pytest.mark.parametrize(
    "hour,minute,expected",
    [(0, 0, True), (23, 59, True), (24, 0, False), (12, 60, False), (-1, 10, False)],
)
def test_valid_time(hour, minute, expected):
    assert valid_time(hour, minute) is expected


def test_date_formats():
    date = DepartureDate(5, 3, 2025)
    assert str(date) == "05/03/2025"
    assert date.to_file() == "05 / 03 / 2025"


def test_time_formats_round_trip():
    t = DepartureTime(9, 5)
    assert t.to_file() == "09 : 05"
    assert DepartureTime.parse(str(t)) == t
    assert DepartureTime.parse(t.to_file()) == t


def test_date_parse_round_trip():
    date = DepartureDate(17, 11, 2031)
    assert DepartureDate.parse(str(date)) == date
    assert DepartureDate.parse(date.to_file()) == date


def test_parse_rejects_garbage():
    with pytest.raises(ValueError):
        DepartureDate.parse("tomorrow")
    with pytest.raises(ValueError):
        DepartureTime.parse("9-5")


def test_has_departed():
    date = DepartureDate(5, 3, 2025)
    time = DepartureTime(9, 5)
    assert has_departed(date, time, datetime(2025, 3, 5, 9, 5)) is True
    assert has_departed(date, time, datetime(2025, 3, 5, 9, 4)) is False
    assert has_departed(date, time, datetime(2026, 1, 1)) is True


def test_status_labels_round_trip():
    assert Status.SOLD_OUT.label == "sold out"
    for status in Status:
        assert Status.from_label(status.label) is status
    with pytest.raises(ValueError):
        Status.from_label("delayed")


def test_passenger_validity():
    p = Passenger("123", "NGUYEN", "AN", None)
    assert p.is_valid() is False
    p.gender = False
    assert p.is_valid() is True
    assert Passenger("", "NGUYEN", "AN", True).is_valid() is False


def test_passenger_round_trip():
    p = Passenger("0123456", "TRAN VAN", "BINH", True, 2)
    assert Passenger.loads(p.dumps()) == p


def test_passenger_dumps_without_gender_fails():
    with pytest.raises(ValueError):
        Passenger("1", "A", "B", None).dumps()


def test_passenger_loads_truncated():
    with pytest.raises(ValueError):
        Passenger.loads("123\nA\n")


def test_plane_round_trip():
    plane = Plane("VN1", "BOEING 787", 240, 3)
    index, loaded = Plane.loads(plane.dumps(7))
    assert index == 7
    assert loaded == plane


def test_flight_seat_lists():
    flight = make_flight()
    assert flight.total_seats == 4
    assert flight.passenger_seats() == [1, 3]
    assert flight.available_seats() == [0, 2]
    assert sorted(flight.passenger_seats() + flight.available_seats()) == list(range(4))


def test_flight_can_book():
    flight = make_flight()
    assert flight.can_book("111") is False
    assert flight.can_book("333") is True


def test_flight_round_trip():
    flight = make_flight(status=Status.SOLD_OUT)
    assert Flight.loads(flight.dumps()) == flight


def test_flight_dumps_lines():
    lines = make_flight().dumps().splitlines()
    assert lines[3] == DepartureDate(5, 3, 2025).to_file()
    assert lines[5] == "4"
    assert lines[6] == Status.AVAILABLE.label
    assert lines[7:] == ["1 111", "3 222"]


def test_flight_loads_unknown_status_defaults_to_available():
    text = make_flight(status=Status.CANCELLED).dumps().replace("cancelled", "delayed")
    assert Flight.loads(text).status is Status.AVAILABLE


def test_flight_loads_bad_seat():
    text = make_flight().dumps() + "9 555\n"
    with pytest.raises(ValueError):
        Flight.loads(text)