"""ChatChannel ABC — the host messaging environment.

The mini-app runs inside a chat platform (LINE).  When the caller is signed
in there, a booking summary can be posted to the chat on their behalf.
Concrete channels wrap a specific platform API; the recorder only ever
sees this interface.
"""

from abc import ABC, abstractmethod


class ChatChannel(ABC):
    """Abstract chat channel able to deliver one plain-text message."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short platform name used in logs and status lines, e.g. ``LINE``."""

    @abstractmethod
    async def send_text(self, user_id: str, text: str) -> None:
        """Send ``text`` to the chat of ``user_id``.

        Raises on any delivery failure; callers decide whether that matters.
        """

    async def close(self) -> None:
        """Release transport resources. Safe to call multiple times."""
