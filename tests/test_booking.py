from datetime import datetime
from types import SimpleNamespace

from barberbook.booking import AppointmentCandidate, validate_booking
from barberbook.core import AppointmentStatus
from barberbook.errors import RejectionReason, StaleSlotError
from barberbook.schemas import BookingRequest

from conftest import MONDAY, week

HOURS = week(monday={"start": "09:00", "end": "13:00", "enabled": True})
HAIRCUT = SimpleNamespace(id=7, duration_minutes=60)
BOOKED = [SimpleNamespace(start_time=datetime(2024, 1, 1, 10), end_time=datetime(2024, 1, 1, 11), status="scheduled")]


def request(**overrides):
    data = {"establishment_id": 3, "service_id": 7, "date": MONDAY, "time": "11:00"}
    data.update(overrides)
    return BookingRequest(**data)


def test_accepts_free_slot():
    result = validate_booking(request(), HAIRCUT, HOURS, BOOKED)

    assert result.accepted
    assert result.reason is None
    candidate = result.appointment
    assert isinstance(candidate, AppointmentCandidate)
    assert candidate.establishment_id == 3
    assert candidate.service_id == 7
    assert candidate.start_time == datetime(2024, 1, 1, 11, 0)
    assert candidate.end_time == datetime(2024, 1, 1, 12, 0)
    assert candidate.status is AppointmentStatus.scheduled


def test_time_not_in_listing_is_rejected():
    for time in ("12:00", "09:15", "13:00", "07:00"):
        result = validate_booking(request(time=time), HAIRCUT, HOURS, BOOKED)
        assert not result.accepted
        assert result.reason is RejectionReason.slot_unavailable
        assert not result.error.stale


def test_taken_slot_is_reported_as_stale():
    result = validate_booking(request(time="10:00"), HAIRCUT, HOURS, BOOKED)

    assert result.reason is RejectionReason.slot_unavailable
    assert isinstance(result.error, StaleSlotError)
    assert result.error.stale


def test_closed_day_is_not_stale():
    result = validate_booking(request(time="10:00"), HAIRCUT, week(), [])
    assert result.reason is RejectionReason.slot_unavailable
    assert not result.error.stale


def test_missing_fields():
    result = validate_booking(request(time=None, service_id=None), HAIRCUT, HOURS, [])
    assert result.reason is RejectionReason.missing_field
    assert "service_id" in result.error.detail
    assert "time" in result.error.detail

    result = validate_booking(request(time="  "), HAIRCUT, HOURS, [])
    assert result.reason is RejectionReason.missing_field


def test_barber_required_when_establishment_has_staff():
    result = validate_booking(request(), HAIRCUT, HOURS, [], requires_barber=True)
    assert result.reason is RejectionReason.missing_field
    assert "barber_id" in result.error.detail

    result = validate_booking(request(barber_id=4), HAIRCUT, HOURS, [], requires_barber=True)
    assert result.accepted
    assert result.appointment.barber_id == 4


def test_unknown_service():
    assert validate_booking(request(), None, HOURS, []).reason is RejectionReason.unknown_service

    other = SimpleNamespace(id=8, duration_minutes=60)
    assert validate_booking(request(), other, HOURS, []).reason is RejectionReason.unknown_service


def test_time_with_trailing_newline_is_not_a_taken_slot():
    result = validate_booking(request(time="10:00\n"), HAIRCUT, HOURS, [])
    assert result.reason is RejectionReason.slot_unavailable
    assert not result.error.stale
