"""Outcome values for best-effort side channels and whole submissions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from roombooking.models.booking import StoredBooking


class OutcomeStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class SideChannelOutcome:
    """Tagged result of a notification or announcement attempt."""

    status: OutcomeStatus
    message: str = ""

    @classmethod
    def sent(cls, message: str = "") -> "SideChannelOutcome":
        return cls(OutcomeStatus.SENT, message)

    @classmethod
    def skipped(cls, message: str = "") -> "SideChannelOutcome":
        return cls(OutcomeStatus.SKIPPED, message)

    @classmethod
    def failed(cls, message: str) -> "SideChannelOutcome":
        return cls(OutcomeStatus.FAILED, message)


# Aliases matching the two side channels
NotifyOutcome = SideChannelOutcome
AnnounceOutcome = SideChannelOutcome


@dataclass(frozen=True)
class SubmissionResult:
    """A successful submission: recorded, plus side-channel outcomes.

    ``recorded`` is always True here; validation and storage failures are
    raised instead of returned.
    """

    booking: StoredBooking
    notified: SideChannelOutcome
    announced: SideChannelOutcome
    close_view: bool = False
    recorded: bool = True

    def to_dict(self, message: Optional[str] = None) -> dict:
        d = {
            "recorded": self.recorded,
            "notified": self.notified.status.value,
            "announced": self.announced.status.value,
            "closeView": self.close_view,
            "booking": self.booking.to_wire(),
        }
        if self.notified.message:
            d["notifyDetail"] = self.notified.message
        if self.announced.message:
            d["announceDetail"] = self.announced.message
        if message is not None:
            d["message"] = message
        return d
