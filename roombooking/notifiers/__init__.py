"""Remote notification of recorded bookings."""

from .webhook import WebhookNotifier, build_payload

__all__ = ["WebhookNotifier", "build_payload"]
