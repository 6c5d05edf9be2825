"""Pydantic models for booking candidates and recorded bookings.

Attribute names are snake_case; the wire format (webhook payload, API,
ledger file) keeps the mini-app's camelCase keys via field aliases.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BookingCandidate(BaseModel):
    """Raw form values as submitted, before validation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    department: str = ""
    day_to_use: Union[date, str] = ""  # YYYY-MM-DD
    time_slot: str = ""
    room_id: str = ""
    user_id: Optional[str] = None


class Booking(BaseModel):
    """A validated booking. Created once, never mutated."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    name: str
    department: str
    day_to_use: date
    time_slot: str
    room_id: str
    created_at: datetime
    user_id: Optional[str] = None

    def to_wire(self) -> dict:
        """Serialize with camelCase keys and ISO strings."""
        return self.model_dump(mode="json", by_alias=True)


class StoredBooking(Booking):
    """A booking as held by the ledger, with its 1-based position."""

    seq: int
