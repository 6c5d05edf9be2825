"""Abstract base class for booking ledgers.

A ledger is an append-only ordered store of bookings.  There is no update
or delete: cancellation is not supported, and entries are only ever
removed by discarding the whole store.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from roombooking.models.booking import Booking, StoredBooking


class StorageError(RuntimeError):
    """The ledger medium is unavailable or full; nothing was written."""


class LedgerStore(ABC):
    """Abstract ledger backend.

    Implementations must make ``append`` atomic: either the full record is
    stored or none of it is, and earlier entries are never disturbed.
    """

    @abstractmethod
    async def append(self, booking: Booking) -> StoredBooking:
        """Append a booking at the end of the ledger.

        Args:
            booking: A validated booking.

        Returns:
            The stored booking, carrying its 1-based ``seq`` position.

        Raises:
            StorageError: The medium is unavailable or full.
        """

    @abstractmethod
    async def list_all(self) -> list[StoredBooking]:
        """Return every stored booking in insertion order."""

    async def list_for_day(self, day: Optional[date] = None) -> list[StoredBooking]:
        """Full-scan listing, optionally restricted to one ``dayToUse``."""
        entries = await self.list_all()
        if day is None:
            return entries
        return [b for b in entries if b.day_to_use == day]
