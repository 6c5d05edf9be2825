"""Tests for booking validation and the room/slot catalog."""

from datetime import date, datetime, timedelta, timezone

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from roombooking.catalog import DEFAULT_ROOM_ID, ROOMS, TIME_SLOTS, get_room, room_label
from roombooking.models.booking import Booking, BookingCandidate
from roombooking.validation import (
    BookingValidationError,
    ValidationErrorCode,
    parse_day,
    validate,
)

TODAY = date(2026, 3, 15)
NOW = datetime(2026, 3, 15, 10, 0, tzinfo=timezone.utc)


def _candidate(**overrides) -> BookingCandidate:
    fields = {
        "name": "Alice",
        "department": "IT",
        "day_to_use": TODAY.isoformat(),
        "time_slot": "09:00-10:00",
        "room_id": "CR-101",
    }
    fields.update(overrides)
    return BookingCandidate(**fields)


def _code(candidate: BookingCandidate) -> ValidationErrorCode:
    with pytest.raises(BookingValidationError) as exc_info:
        validate(candidate, today=TODAY, created_at=NOW)
    return exc_info.value.code


# ── Catalog ─────────────────────────────────────────────────────────


class TestCatalog:
    def test_rooms(self):
        assert [r.id for r in ROOMS] == ["CR-101", "CR-202", "CR-Aud", "CR-Meet"]
        assert DEFAULT_ROOM_ID == "CR-101"

    def test_room_label(self):
        assert room_label("CR-Aud") == "Auditorium (30 ppl)"
        assert get_room("CR-Meet").capacity == 2

    def test_unknown_room_label_falls_back_to_id(self):
        assert room_label("CR-999") == "CR-999"
        assert get_room("CR-999") is None

    def test_no_lunch_slot(self):
        assert len(TIME_SLOTS) == 7
        assert "12:00-13:00" not in TIME_SLOTS
        assert TIME_SLOTS[0] == "09:00-10:00"
        assert TIME_SLOTS[-1] == "16:00-17:00"


# ── Happy path ──────────────────────────────────────────────────────


class TestValidBooking:
    def test_normalizes_fields(self):
        booking = validate(
            _candidate(name="  Alice  ", department="\tIT \n"),
            today=TODAY,
            created_at=NOW,
        )
        assert isinstance(booking, Booking)
        assert booking.name == "Alice"
        assert booking.department == "IT"
        assert booking.day_to_use == TODAY
        assert booking.created_at == NOW
        assert booking.user_id is None

    def test_accepts_date_object(self):
        booking = validate(
            _candidate(day_to_use=TODAY + timedelta(days=7)),
            today=TODAY,
            created_at=NOW,
        )
        assert booking.day_to_use == date(2026, 3, 22)

    def test_keeps_user_id(self):
        booking = validate(_candidate(user_id="U1234567890"), today=TODAY, created_at=NOW)
        assert booking.user_id == "U1234567890"

    def test_empty_user_id_becomes_none(self):
        booking = validate(_candidate(user_id=""), today=TODAY, created_at=NOW)
        assert booking.user_id is None

    def test_validation_is_idempotent(self):
        candidate = _candidate(name=" Bob ")
        first = validate(candidate, today=TODAY, created_at=NOW)
        second = validate(candidate, today=TODAY, created_at=NOW)
        assert first == second

    def test_every_room_and_slot_accepted(self):
        for room in ROOMS:
            for slot in TIME_SLOTS:
                booking = validate(
                    _candidate(room_id=room.id, time_slot=slot),
                    today=TODAY,
                    created_at=NOW,
                )
                assert booking.room_id == room.id
                assert booking.time_slot == slot

    def test_wire_format_is_camel_case(self):
        booking = validate(_candidate(), today=TODAY, created_at=NOW)
        wire = booking.to_wire()
        assert wire["dayToUse"] == "2026-03-15"
        assert wire["timeSlot"] == "09:00-10:00"
        assert wire["roomId"] == "CR-101"
        assert wire["userId"] is None
        assert wire["createdAt"].startswith("2026-03-15T10:00:00")

    def test_candidate_accepts_camel_case(self):
        candidate = BookingCandidate.model_validate({
            "name": "Alice",
            "department": "IT",
            "dayToUse": "2026-03-15",
            "timeSlot": "10:00-11:00",
            "roomId": "CR-202",
        })
        assert candidate.time_slot == "10:00-11:00"
        assert candidate.room_id == "CR-202"


# ── Rejections ──────────────────────────────────────────────────────


class TestRejections:
    @pytest.mark.parametrize("name", ["", " ", "   ", "\t\n"])
    def test_blank_name(self, name):
        assert _code(_candidate(name=name)) is ValidationErrorCode.MISSING_NAME

    def test_blank_name_wins_over_other_errors(self):
        bad = _candidate(
            name=" ", department="", day_to_use="2020-01-01",
            time_slot="nope", room_id="nope",
        )
        assert _code(bad) is ValidationErrorCode.MISSING_NAME

    def test_blank_department(self):
        assert _code(_candidate(department="  ")) is ValidationErrorCode.MISSING_DEPARTMENT

    def test_department_checked_before_date(self):
        bad = _candidate(department="", day_to_use="2020-01-01")
        assert _code(bad) is ValidationErrorCode.MISSING_DEPARTMENT

    def test_yesterday(self):
        yesterday = (TODAY - timedelta(days=1)).isoformat()
        assert _code(_candidate(day_to_use=yesterday)) is ValidationErrorCode.INVALID_DATE

    @pytest.mark.parametrize("value", ["", "tomorrow", "2026-02-30", "15/03/2026"])
    def test_unparseable_date(self, value):
        assert _code(_candidate(day_to_use=value)) is ValidationErrorCode.INVALID_DATE

    @pytest.mark.parametrize("slot", ["", "12:00-13:00", "09:00-09:30", "9:00-10:00"])
    def test_unknown_slot(self, slot):
        assert _code(_candidate(time_slot=slot)) is ValidationErrorCode.INVALID_SLOT

    def test_slot_checked_before_room(self):
        bad = _candidate(time_slot="08:00-09:00", room_id="CR-999")
        assert _code(bad) is ValidationErrorCode.INVALID_SLOT

    @pytest.mark.parametrize("room", ["", "CR-999", "cr-101", "Room 101"])
    def test_unknown_room(self, room):
        assert _code(_candidate(room_id=room)) is ValidationErrorCode.INVALID_ROOM

    def test_error_message_includes_code(self):
        with pytest.raises(BookingValidationError) as exc_info:
            validate(_candidate(room_id="CR-999"), today=TODAY, created_at=NOW)
        assert "InvalidRoom" in str(exc_info.value)


class TestParseDay:
    def test_iso_string(self):
        assert parse_day("2026-03-15") == TODAY

    def test_strips_whitespace(self):
        assert parse_day(" 2026-03-15 ") == TODAY

    def test_datetime_truncated(self):
        assert parse_day(NOW) == TODAY

    def test_invalid(self):
        assert parse_day("March 15") is None
