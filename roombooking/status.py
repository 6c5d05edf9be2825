"""Consolidated, user-facing status line for one submission."""

from __future__ import annotations

from typing import Union

from roombooking.ledger.base import StorageError
from roombooking.outcomes import OutcomeStatus, SubmissionResult
from roombooking.validation import BookingValidationError, ValidationErrorCode

VALIDATION_MESSAGES: dict[ValidationErrorCode, str] = {
    ValidationErrorCode.MISSING_NAME: "Please fill in Name and Department.",
    ValidationErrorCode.MISSING_DEPARTMENT: "Please fill in Name and Department.",
    ValidationErrorCode.INVALID_DATE: "Please choose today or a later date.",
    ValidationErrorCode.INVALID_SLOT: "Please choose a valid time slot.",
    ValidationErrorCode.INVALID_ROOM: "Please choose a valid room.",
}

STORAGE_MESSAGE = "Could not save your booking. Please try again."


def status_line(
    outcome: Union[SubmissionResult, BookingValidationError, StorageError],
    channel_name: str = "LINE",
) -> str:
    """Summarize the governing outcome in one line.

    Errors win; otherwise the message notes which side channels went out.
    """
    if isinstance(outcome, BookingValidationError):
        return VALIDATION_MESSAGES[outcome.code]
    if isinstance(outcome, StorageError):
        return STORAGE_MESSAGE

    if outcome.notified.status is OutcomeStatus.SENT:
        return "Booking submitted!"

    parts = ["Saved locally."]
    if outcome.announced.status is OutcomeStatus.SENT:
        parts.append(f"Sent {channel_name} message.")
    parts.append("Webhook skipped/failed.")
    return " ".join(parts)
