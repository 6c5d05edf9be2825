"""Application configuration via environment variables."""

from __future__ import annotations

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings

log = logging.getLogger("roombooking.config")


class Settings(BaseSettings):
    # LINE LIFF
    liff_id: str = ""

    # Remote notification webhook (Apps Script, Firebase, ...)
    webhook_url: str = ""
    notify_timeout: float = 10.0
    notify_retries: int = 0
    notify_retry_delay: float = 0.5

    # LINE Messaging API (chat announcements)
    line_channel_access_token: str = ""
    line_api_url: str = "https://api.line.me/v2/bot/message/push"

    # Ledger
    ledger_path: str = "data/bookings.jsonl"  # empty -> in-memory
    booking_timezone: str = "UTC"

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def liff_enabled(self) -> bool:
        return bool(self.liff_id) and "REPLACE" not in self.liff_id

    @property
    def liff_url(self) -> str:
        """Link that opens the mini-app in LINE; empty in preview mode."""
        return f"https://liff.line.me/{self.liff_id}" if self.liff_enabled else ""

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        try:
            ZoneInfo(self.booking_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(
                f"BOOKING_TIMEZONE {self.booking_timezone!r} is not a known timezone."
            )

        if self.notify_retries < 0:
            raise ValueError("NOTIFY_RETRIES must be zero or positive.")

        if not self.liff_enabled:
            warnings.append(
                "LIFF_ID is not set (or still a placeholder). "
                "The mini-app runs in preview mode."
            )

        if not self.webhook_url:
            warnings.append(
                "WEBHOOK_URL not set. Bookings are kept in the local ledger only."
            )

        if not self.line_channel_access_token:
            warnings.append(
                "LINE_CHANNEL_ACCESS_TOKEN not set. Chat announcements are disabled."
            )

        if not self.ledger_path:
            warnings.append(
                "LEDGER_PATH is empty. Bookings are held in memory and lost on restart."
            )

        return warnings


settings = Settings()
