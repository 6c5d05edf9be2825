"""Booking recorder — validate, record, then notify and announce.

One submission runs through::

    validate ──fail──> BookingValidationError   (nothing written)
        │
    record ───fail──> StorageError              (nothing written)
        │
        ├── notify_external ─┐  run concurrently, each converted
        └── announce_in_chat ┘  to a sent/skipped/failed outcome

Only ``record`` decides whether the booking succeeded.  The two side
channels never raise and never undo the ledger append.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Optional
from zoneinfo import ZoneInfo

from roombooking.catalog import DEFAULT_ROOM_ID, DEFAULT_TIME_SLOT, room_label
from roombooking.channels.base import ChatChannel
from roombooking.events import BookingBroadcaster
from roombooking.ledger.base import LedgerStore
from roombooking.models.booking import Booking, BookingCandidate, StoredBooking
from roombooking.models.identity import HostIdentity
from roombooking.notifiers.webhook import WebhookNotifier
from roombooking.outcomes import AnnounceOutcome, NotifyOutcome, SubmissionResult
from roombooking.validation import validate

log = logging.getLogger("roombooking.recorder")


def redact_pii(value: str | None) -> str:
    """Mask PII for logging — show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


def format_announcement(booking: Booking) -> str:
    """Human-readable booking summary posted to the chat."""
    return (
        "📌 Room Booking\n"
        f"👤 {booking.name} ({booking.department})\n"
        f"🏢 Room: {room_label(booking.room_id)}\n"
        f"🗓️ Date: {booking.day_to_use.isoformat()}\n"
        f"⏰ Time: {booking.time_slot}"
    )


class MonotonicClock:
    """Wall clock in the booking timezone that never runs backwards.

    ``created_at`` stamps issued by one clock are non-decreasing even if
    the system clock is adjusted between submissions.
    """

    def __init__(
        self,
        timezone: str = "UTC",
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._tz = ZoneInfo(timezone)
        self._now = now or (lambda: datetime.now(tz=self._tz))
        self._last: datetime | None = None

    def now(self) -> datetime:
        current = self._now()
        if current.tzinfo is None:
            current = current.replace(tzinfo=self._tz)
        if self._last is not None and current < self._last:
            current = self._last
        self._last = current
        return current

    def date_of(self, moment: datetime) -> date:
        """Calendar date of ``moment`` in the booking timezone."""
        if moment.tzinfo is None:
            return moment.date()
        return moment.astimezone(self._tz).date()

    def today(self) -> date:
        return self.date_of(self._now())


class BookingRecorder:
    """Records bookings into an injected ledger.

    Typical use::

        recorder = BookingRecorder(
            ledger=JsonlLedger("data/bookings.jsonl"),
            notifier=WebhookNotifier(settings.webhook_url),
            channel=LineMessagingChannel(settings.line_channel_access_token),
        )
        result = await recorder.submit(candidate, identity=profile)

    ``channel`` is the host messaging capability, fixed at construction:
    None means no push channel, and every announcement is then skipped.
    ``liff_enabled`` says the mini-app runs under a real LIFF id; only then
    is a submission from inside the LINE client told to close its view.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        notifier: Optional[WebhookNotifier] = None,
        channel: Optional[ChatChannel] = None,
        clock: Optional[MonotonicClock] = None,
        broadcaster: Optional[BookingBroadcaster] = None,
        side_channel_timeout: Optional[float] = None,
        liff_enabled: bool = False,
    ) -> None:
        self._ledger = ledger
        self._notifier = notifier
        self._channel = channel
        self._clock = clock or MonotonicClock()
        self._broadcaster = broadcaster
        self._side_channel_timeout = side_channel_timeout
        self._liff_enabled = liff_enabled

    # ── Properties ───────────────────────────────────────────────

    @property
    def ledger(self) -> LedgerStore:
        return self._ledger

    @property
    def messaging_available(self) -> bool:
        return self._channel is not None

    @property
    def liff_enabled(self) -> bool:
        return self._liff_enabled

    @property
    def channel_name(self) -> str:
        return self._channel.name if self._channel else ""

    @property
    def broadcaster(self) -> BookingBroadcaster | None:
        return self._broadcaster

    def attach_broadcaster(self, broadcaster: BookingBroadcaster) -> None:
        """Attach a broadcaster for the live booking stream."""
        self._broadcaster = broadcaster

    async def close(self) -> None:
        if self._channel is not None:
            await self._channel.close()

    # ── Core operations ──────────────────────────────────────────

    def validate(self, candidate: BookingCandidate) -> Booking:
        """Validate and normalize a candidate, stamping ``created_at``.

        The clock is read once; "today" is the date of that stamp.
        """
        created_at = self._clock.now()
        return validate(
            candidate,
            today=self._clock.date_of(created_at),
            created_at=created_at,
        )

    async def record(self, booking: Booking) -> StoredBooking:
        """Append to the ledger. StorageError propagates."""
        stored = await self._ledger.append(booking)
        log.info(
            "Booking recorded: seq=%d room=%s day=%s slot=%s user=%s",
            stored.seq,
            stored.room_id,
            stored.day_to_use.isoformat(),
            stored.time_slot,
            redact_pii(stored.user_id),
        )
        if self._broadcaster:
            self._broadcaster.emit("booking_recorded", stored.to_wire())
        return stored

    async def notify_external(self, booking: Booking) -> NotifyOutcome:
        if self._notifier is None or not self._notifier.configured:
            return NotifyOutcome.skipped("No WEBHOOK_URL set (skipping)")
        try:
            return await self._bounded(self._notifier.notify(booking))
        except Exception as e:
            log.warning("Webhook notification failed: %r", e)
            return NotifyOutcome.failed(str(e) or repr(e))

    async def announce_in_chat(
        self, booking: Booking, identity: Optional[HostIdentity]
    ) -> AnnounceOutcome:
        if self._channel is None:
            return AnnounceOutcome.skipped("Host messaging not available")
        if identity is None or not identity.is_authenticated:
            return AnnounceOutcome.skipped("Caller not signed in to host")

        try:
            await self._bounded(
                self._channel.send_text(identity.user_id, format_announcement(booking))
            )
        except Exception as e:
            log.warning("%s sendMessages failed: %r", self._channel.name, e)
            return AnnounceOutcome.failed(str(e) or repr(e))
        return AnnounceOutcome.sent()

    async def submit(
        self,
        candidate: BookingCandidate,
        identity: Optional[HostIdentity] = None,
        in_client: bool = False,
    ) -> SubmissionResult:
        """Run one submission end to end.

        Raises:
            BookingValidationError: the form is invalid; nothing was written.
            StorageError: the ledger could not be written.
        """
        if identity is not None and identity.user_id and not candidate.user_id:
            candidate = candidate.model_copy(update={"user_id": identity.user_id})

        booking = self.validate(candidate)
        stored = await self.record(booking)

        notified, announced = await asyncio.gather(
            self.notify_external(stored),
            self.announce_in_chat(stored, identity),
        )
        log.info(
            "Submission seq=%d: notified=%s announced=%s",
            stored.seq,
            notified.status.value,
            announced.status.value,
        )

        return SubmissionResult(
            booking=stored,
            notified=notified,
            announced=announced,
            close_view=in_client and self._liff_enabled,
        )

    # ── Read side ────────────────────────────────────────────────

    async def list_bookings(self, day: Optional[date] = None) -> list[StoredBooking]:
        return await self._ledger.list_for_day(day)

    def form_defaults(self, identity: Optional[HostIdentity] = None) -> dict[str, Any]:
        """Initial form values; the name is prefilled from the host profile."""
        return {
            "name": identity.display_name if identity else "",
            "department": "",
            "dayToUse": self._clock.today().isoformat(),
            "timeSlot": DEFAULT_TIME_SLOT,
            "roomId": DEFAULT_ROOM_ID,
            "userId": identity.user_id if identity else None,
        }

    # ── Helpers ──────────────────────────────────────────────────

    async def _bounded(self, aw: Awaitable[Any]) -> Any:
        if self._side_channel_timeout is None:
            return await aw
        return await asyncio.wait_for(aw, timeout=self._side_channel_timeout)
