"""Fixed room and time-slot catalog.

Rooms and slots are configuration data shared by validation and every
display surface (API, CLI).  Capacity is informational and never enforced.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Room:
    """A bookable conference room."""

    id: str
    name: str
    capacity: int

    @property
    def label(self) -> str:
        """Display label shown in the room picker, e.g. ``Room 101 (4 ppl)``."""
        return f"{self.name} ({self.capacity} ppl)"


ROOMS: tuple[Room, ...] = (
    Room(id="CR-101", name="Room 101", capacity=4),
    Room(id="CR-202", name="Room 202", capacity=8),
    Room(id="CR-Aud", name="Auditorium", capacity=30),
    Room(id="CR-Meet", name="Meeting Pod", capacity=2),
)

# No 12:00-13:00 slot (lunch)
TIME_SLOTS: tuple[str, ...] = (
    "09:00-10:00",
    "10:00-11:00",
    "11:00-12:00",
    "13:00-14:00",
    "14:00-15:00",
    "15:00-16:00",
    "16:00-17:00",
)

ROOMS_BY_ID: dict[str, Room] = {room.id: room for room in ROOMS}

DEFAULT_ROOM_ID = ROOMS[0].id
DEFAULT_TIME_SLOT = TIME_SLOTS[0]


def get_room(room_id: str) -> Room | None:
    return ROOMS_BY_ID.get(room_id)


def room_label(room_id: str) -> str:
    """Display label for a room id, falling back to the raw id."""
    room = ROOMS_BY_ID.get(room_id)
    return room.label if room else room_id
