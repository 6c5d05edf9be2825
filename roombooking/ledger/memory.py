"""In-memory ledger, used for preview mode and tests."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from roombooking.ledger.base import LedgerStore, StorageError
from roombooking.models.booking import Booking, StoredBooking

logger = logging.getLogger(__name__)


class InMemoryLedger(LedgerStore):
    """Ledger held in a Python list.

    ``capacity`` caps the number of entries; appending past it raises
    StorageError the way a full browser store would.
    """

    def __init__(self, capacity: Optional[int] = None) -> None:
        self._entries: list[StoredBooking] = []
        self._capacity = capacity
        self._lock = asyncio.Lock()

    async def append(self, booking: Booking) -> StoredBooking:
        async with self._lock:
            if self._capacity is not None and len(self._entries) >= self._capacity:
                raise StorageError(
                    f"Ledger is full ({self._capacity} entries)."
                )
            stored = StoredBooking(**booking.model_dump(), seq=len(self._entries) + 1)
            self._entries.append(stored)
            logger.debug("Ledger append seq=%d (in-memory)", stored.seq)
            return stored

    async def list_all(self) -> list[StoredBooking]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
