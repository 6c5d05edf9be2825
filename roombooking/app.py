"""FastAPI application — HTTP + WebSocket endpoints for room booking.

Endpoints:

  GET  /health                 Health check
  GET  /api/config             LIFF id, "Open in LINE" link, preview flag
  GET  /api/rooms              Room catalog
  GET  /api/timeslots          Time-slot catalog
  GET  /api/form-defaults      Initial form values (name from host profile)
  GET  /api/bookings?day=      Ledger listing, optionally for one date
  POST /api/bookings           Submit a booking
  WS   /api/bookings/stream    Live feed of recorded bookings

The submit flow:
  1. The mini-app posts the form plus the LIFF profile (if signed in)
  2. The recorder validates and appends to the ledger
  3. Webhook and LINE announcement run best-effort
  4. The response carries the outcomes and a single status line
"""

from __future__ import annotations

# Load .env into os.environ before settings are read elsewhere.
from dotenv import load_dotenv
load_dotenv()

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from roombooking.catalog import ROOMS, TIME_SLOTS
from roombooking.channels.line import LineMessagingChannel
from roombooking.config import Settings, settings
from roombooking.events import BookingBroadcaster
from roombooking.ledger.base import LedgerStore, StorageError
from roombooking.ledger.jsonl import JsonlLedger
from roombooking.ledger.memory import InMemoryLedger
from roombooking.models.booking import BookingCandidate
from roombooking.models.identity import HostIdentity
from roombooking.notifiers.webhook import WebhookNotifier
from roombooking.recorder import BookingRecorder, MonotonicClock
from roombooking.status import status_line
from roombooking.validation import BookingValidationError, parse_day

log = logging.getLogger("roombooking.app")

_START_TIME = time.time()


class SubmitRequest(BookingCandidate):
    """POST /api/bookings body: form fields plus host context."""

    identity: Optional[HostIdentity] = None
    in_client: bool = False


def build_recorder(cfg: Settings = settings) -> BookingRecorder:
    """Construct the recorder and its collaborators from configuration.

    Runs once at startup; the host messaging capability is decided here.
    """
    for warning in cfg.validate_startup():
        log.warning(warning)

    ledger: LedgerStore
    if cfg.ledger_path:
        ledger = JsonlLedger(cfg.ledger_path)
    else:
        ledger = InMemoryLedger()

    channel = None
    if cfg.line_channel_access_token:
        channel = LineMessagingChannel(
            access_token=cfg.line_channel_access_token,
            api_url=cfg.line_api_url,
            timeout=cfg.notify_timeout,
        )

    return BookingRecorder(
        ledger=ledger,
        notifier=WebhookNotifier(
            url=cfg.webhook_url,
            timeout=cfg.notify_timeout,
            retries=cfg.notify_retries,
            retry_delay=cfg.notify_retry_delay,
        ),
        channel=channel,
        clock=MonotonicClock(cfg.booking_timezone),
        broadcaster=BookingBroadcaster(),
        liff_enabled=cfg.liff_enabled,
    )


def create_app(
    recorder: Optional[BookingRecorder] = None,
    cfg: Settings = settings,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Tests inject a recorder; otherwise one is built from ``cfg``.
    """
    if recorder is None:
        recorder = build_recorder(cfg)
    if recorder.broadcaster is None:
        recorder.attach_broadcaster(BookingBroadcaster())
    broadcaster = recorder.broadcaster

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(
            "Room booking service ready (ledger=%s, messaging=%s)",
            type(recorder.ledger).__name__,
            recorder.channel_name or "off",
        )
        yield
        await recorder.close()

    app = FastAPI(
        title="Conference Room Reservation",
        description="Room booking recorder for the LINE mini-app",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.recorder = recorder
    app.state.broadcaster = broadcaster

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    @app.get("/api/config")
    async def client_config() -> JSONResponse:
        """Values the mini-app needs before calling liff.init()."""
        return JSONResponse({
            "liffId": cfg.liff_id if cfg.liff_enabled else "",
            "liffUrl": cfg.liff_url,
            "previewMode": not cfg.liff_enabled,
        })

    # ── Catalog ────────────────────────────────────────────────

    @app.get("/api/rooms")
    async def list_rooms() -> JSONResponse:
        return JSONResponse([
            {"id": r.id, "name": r.name, "capacity": r.capacity, "label": r.label}
            for r in ROOMS
        ])

    @app.get("/api/timeslots")
    async def list_timeslots() -> JSONResponse:
        return JSONResponse(list(TIME_SLOTS))

    @app.get("/api/form-defaults")
    async def form_defaults(
        display_name: str = Query(default="", alias="displayName"),
        user_id: str = Query(default="", alias="userId"),
    ) -> JSONResponse:
        identity = None
        if display_name or user_id:
            identity = HostIdentity(display_name=display_name, user_id=user_id or None)
        return JSONResponse(recorder.form_defaults(identity))

    # ── Bookings ───────────────────────────────────────────────

    @app.get("/api/bookings")
    async def list_bookings(day: str = "") -> JSONResponse:
        target = None
        if day:
            target = parse_day(day)
            if target is None:
                return JSONResponse(
                    {"error": f"Invalid date {day!r}. Use YYYY-MM-DD."},
                    status_code=400,
                )
        try:
            bookings = await recorder.list_bookings(target)
        except StorageError as e:
            log.error("Ledger read failed: %s", e)
            return JSONResponse({"error": "storage", "message": str(e)}, status_code=503)
        return JSONResponse({
            "day": target.isoformat() if target else None,
            "bookings": [b.to_wire() for b in bookings],
            "count": len(bookings),
        })

    @app.post("/api/bookings")
    async def submit_booking(body: SubmitRequest) -> JSONResponse:
        """Record a booking, then notify and announce best-effort.

        ``identity`` is taken from the request body as the mini-app reports
        it; the LIFF ID token is not verified here.  Any caller can therefore
        name any ``userId`` as the recipient of the LINE announcement, so
        deploy this endpoint only behind the mini-app's own access control.
        """
        candidate = BookingCandidate.model_validate(
            body.model_dump(exclude={"identity", "in_client"})
        )
        try:
            result = await recorder.submit(
                candidate, identity=body.identity, in_client=body.in_client
            )
        except BookingValidationError as e:
            log.info("Booking rejected: %s", e)
            return JSONResponse(
                {
                    "error": "validation",
                    "code": e.code.value,
                    "message": status_line(e),
                },
                status_code=422,
            )
        except StorageError as e:
            log.error("Booking not recorded: %s", e)
            return JSONResponse(
                {"error": "storage", "message": status_line(e)},
                status_code=503,
            )

        message = status_line(result, channel_name=recorder.channel_name or "LINE")
        return JSONResponse(result.to_dict(message=message), status_code=201)

    # ── Live booking stream ────────────────────────────────────

    @app.websocket("/api/bookings/stream")
    async def booking_stream(websocket: WebSocket) -> None:
        await websocket.accept()
        queue = broadcaster.subscribe()
        try:
            while True:
                event = await queue.get()
                await websocket.send_json(event)
        except WebSocketDisconnect:
            pass
        except Exception as e:
            log.warning("Booking stream error: %s", e)
        finally:
            broadcaster.unsubscribe(queue)

    return app


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "roombooking.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=log_config,
    )
