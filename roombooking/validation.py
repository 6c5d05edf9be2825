"""Booking validation.

Rules run in a fixed order and stop at the first failure:

  1. name non-empty after trimming          -> MISSING_NAME
  2. department non-empty after trimming    -> MISSING_DEPARTMENT
  3. dayToUse is a date, today or later     -> INVALID_DATE
  4. timeSlot in the slot catalog           -> INVALID_SLOT
  5. roomId in the room catalog             -> INVALID_ROOM

No cross-field checks: the same room and slot may be booked any number
of times.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Union

from roombooking.catalog import ROOMS_BY_ID, TIME_SLOTS
from roombooking.models.booking import Booking, BookingCandidate


class ValidationErrorCode(str, Enum):
    MISSING_NAME = "MissingName"
    MISSING_DEPARTMENT = "MissingDepartment"
    INVALID_DATE = "InvalidDate"
    INVALID_SLOT = "InvalidSlot"
    INVALID_ROOM = "InvalidRoom"


class BookingValidationError(ValueError):
    """A user-correctable problem with the submitted form."""

    def __init__(self, code: ValidationErrorCode, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        super().__init__(f"{code.value}: {detail}" if detail else code.value)


def parse_day(value: Union[date, str]) -> date | None:
    """Parse ``YYYY-MM-DD`` (or pass a date through). None if unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (ValueError, AttributeError):
        return None


def validate(
    candidate: BookingCandidate,
    *,
    today: date,
    created_at: datetime,
) -> Booking:
    """Return a normalized Booking or raise BookingValidationError.

    ``today`` and ``created_at`` are supplied by the caller so the
    decision depends only on the inputs.
    """
    name = candidate.name.strip()
    if not name:
        raise BookingValidationError(ValidationErrorCode.MISSING_NAME)

    department = candidate.department.strip()
    if not department:
        raise BookingValidationError(ValidationErrorCode.MISSING_DEPARTMENT)

    day = parse_day(candidate.day_to_use)
    if day is None:
        raise BookingValidationError(
            ValidationErrorCode.INVALID_DATE,
            f"unparseable date {candidate.day_to_use!r}",
        )
    if day < today:
        raise BookingValidationError(
            ValidationErrorCode.INVALID_DATE,
            f"{day.isoformat()} is before {today.isoformat()}",
        )

    if candidate.time_slot not in TIME_SLOTS:
        raise BookingValidationError(
            ValidationErrorCode.INVALID_SLOT, f"unknown slot {candidate.time_slot!r}"
        )

    if candidate.room_id not in ROOMS_BY_ID:
        raise BookingValidationError(
            ValidationErrorCode.INVALID_ROOM, f"unknown room {candidate.room_id!r}"
        )

    return Booking(
        name=name,
        department=department,
        day_to_use=day,
        time_slot=candidate.time_slot,
        room_id=candidate.room_id,
        created_at=created_at,
        user_id=candidate.user_id or None,
    )
