"""LineMessagingChannel — ChatChannel backed by the LINE Messaging API.

Uses the push-message endpoint with a channel access token:

  POST https://api.line.me/v2/bot/message/push
  Authorization: Bearer <channel access token>
  {"to": "<userId>", "messages": [{"type": "text", "text": "..."}]}

API reference:
  https://developers.line.biz/en/reference/messaging-api/#send-push-message
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from roombooking.channels.base import ChatChannel

log = logging.getLogger("roombooking.channels.line")

LINE_PUSH_URL = "https://api.line.me/v2/bot/message/push"

# LINE rejects text messages longer than this
MAX_TEXT_LENGTH = 5000


class LineMessagingChannel(ChatChannel):
    """Push plain-text messages to LINE users."""

    def __init__(
        self,
        access_token: str,
        api_url: str = LINE_PUSH_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not access_token:
            raise ValueError("LINE channel access token must be provided.")
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        self._api_url = api_url

    @property
    def name(self) -> str:
        return "LINE"

    async def send_text(self, user_id: str, text: str) -> None:
        body = {
            "to": user_id,
            "messages": [{"type": "text", "text": text[:MAX_TEXT_LENGTH]}],
        }
        resp = await self._client.post(self._api_url, json=body)
        if resp.status_code != 200:
            log.error("LINE push failed (%d): %s", resp.status_code, resp.text[:200])
        resp.raise_for_status()

    async def close(self) -> None:
        await self._client.aclose()
        log.info("LINE channel closed")
