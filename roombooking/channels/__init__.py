"""Host messaging channels used for chat announcements."""

from .base import ChatChannel
from .line import LineMessagingChannel

__all__ = ["ChatChannel", "LineMessagingChannel"]
