"""Live booking event broadcaster.

The recorder emits an event whenever a booking lands in the ledger.  Each
connected subscriber (the ``/api/bookings/stream`` WebSocket) gets its own
bounded asyncio.Queue so one slow viewer cannot hold up submissions.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TypedDict

log = logging.getLogger("roombooking.events")


class BookingEvent(TypedDict):
    type: str          # booking_recorded
    timestamp: float
    data: dict


class BookingBroadcaster:
    """Fan-out of booking events using one asyncio.Queue per subscriber."""

    def __init__(self, maxsize: int = 100) -> None:
        self._maxsize = maxsize
        self._subscribers: list[asyncio.Queue[BookingEvent]] = []

    def subscribe(self) -> asyncio.Queue[BookingEvent]:
        """Create a new subscriber queue and return it."""
        q: asyncio.Queue[BookingEvent] = asyncio.Queue(maxsize=self._maxsize)
        self._subscribers.append(q)
        log.info("Booking stream subscriber added (total: %d)", len(self._subscribers))
        return q

    def unsubscribe(self, q: asyncio.Queue[BookingEvent]) -> None:
        """Remove a subscriber queue."""
        try:
            self._subscribers.remove(q)
        except ValueError:
            pass
        log.info("Booking stream subscriber removed (total: %d)", len(self._subscribers))

    def emit(self, event_type: str, data: dict) -> None:
        """Push an event to every subscriber, dropping the oldest when full."""
        event: BookingEvent = {
            "type": event_type,
            "timestamp": time.time(),
            "data": data,
        }
        for q in self._subscribers:
            try:
                q.put_nowait(event)
            except asyncio.QueueFull:
                try:
                    q.get_nowait()
                    q.put_nowait(event)
                except (asyncio.QueueEmpty, asyncio.QueueFull):
                    pass

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
