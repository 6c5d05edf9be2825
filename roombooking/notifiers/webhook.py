"""Forward recorded bookings to an external webhook.

The endpoint (Google Apps Script web app, Firebase function, ...) receives::

    {"action": "createBooking", "data": {<booking, camelCase keys>}}

Redirects are followed (Apps Script answers a POST with a 302 to the
script output).  Any final non-2xx status or transport error counts as a
failure.  Failures are returned as outcomes; nothing here raises.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from roombooking.models.booking import Booking
from roombooking.outcomes import NotifyOutcome

logger = logging.getLogger(__name__)

CREATE_BOOKING_ACTION = "createBooking"


def build_payload(booking: Booking) -> dict:
    return {"action": CREATE_BOOKING_ACTION, "data": booking.to_wire()}


class WebhookNotifier:
    """POST bookings to ``url`` with optional bounded retry.

    An empty ``url`` means no endpoint is configured; every call then
    returns a ``skipped`` outcome.
    """

    def __init__(
        self,
        url: str = "",
        timeout: float = 10.0,
        retries: int = 0,
        retry_delay: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._retries = max(0, retries)
        self._retry_delay = retry_delay
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._url)

    async def notify(self, booking: Booking) -> NotifyOutcome:
        if not self._url:
            return NotifyOutcome.skipped("No WEBHOOK_URL set (skipping)")

        payload = build_payload(booking)
        attempts = self._retries + 1
        last_error = ""

        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            for attempt in range(1, attempts + 1):
                try:
                    resp = await client.post(self._url, json=payload)
                    resp.raise_for_status()
                    logger.info("Webhook accepted booking (status %d)", resp.status_code)
                    return NotifyOutcome.sent()
                except httpx.HTTPStatusError as exc:
                    body = exc.response.text[:200]
                    last_error = f"Webhook returned {exc.response.status_code}: {body}"
                except httpx.HTTPError as exc:
                    last_error = f"Webhook request failed: {exc!r}"

                logger.warning(
                    "Webhook attempt %d/%d failed: %s", attempt, attempts, last_error
                )
                if attempt < attempts:
                    await asyncio.sleep(self._retry_delay)

        return NotifyOutcome.failed(last_error)
