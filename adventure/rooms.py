"""Room model and the flat record format shared by generator and store.

A record is one file per room, named after the room::

    ROOM NAME: desert
    CONNECTION 1: shop
    CONNECTION 2: castle
    ROOM TYPE: START_ROOM

Every line carries exactly three whitespace-separated fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

START_ROOM = "START_ROOM"
MID_ROOM = "MID_ROOM"
END_ROOM = "END_ROOM"
ROOM_TYPES = (START_ROOM, MID_ROOM, END_ROOM)

NAME_MARKER = "NAME"
TYPE_MARKER = "TYPE"
CONNECTION_MARKER = "CONNECTION"


class RoomSetInvariantError(RuntimeError):
    """Raised when a loaded room set breaks a structural invariant."""


@dataclass
class Room:
    name: str
    room_type: str = MID_ROOM
    connections: List[str] = field(default_factory=list)

    @property
    def is_start(self) -> bool:
        return self.room_type == START_ROOM

    @property
    def is_end(self) -> bool:
        return self.room_type == END_ROOM

    def connect(self, other: str) -> bool:
        """Add ``other`` to the connection list; return False if already present."""
        if other in self.connections:
            return False
        self.connections.append(other)
        return True

    def is_connected(self, other: str) -> bool:
        return other in self.connections


def link(first: Room, second: Room) -> bool:
    """Connect two rooms both ways. Returns True only for a new edge."""
    added = first.connect(second.name)
    second.connect(first.name)
    return added


def rooms_by_name(rooms: Iterable[Room]) -> dict:
    return {room.name: room for room in rooms}


def find_room(rooms: Sequence[Room], room_type: str) -> Room:
    """Return the single room with ``room_type`` or raise RoomSetInvariantError."""
    matches = [room for room in rooms if room.room_type == room_type]
    if len(matches) != 1:
        raise RoomSetInvariantError(
            f"expected exactly one {room_type}, found {len(matches)}."
        )
    return matches[0]


def format_record(room: Room, ordered_names: Sequence[str]) -> str:
    """Serialize ``room``; connections follow the order of ``ordered_names``."""
    lines = [f"ROOM NAME: {room.name}"]
    counter = 1
    for name in ordered_names:
        if room.is_connected(name):
            lines.append(f"CONNECTION {counter}: {name}")
            counter += 1
    lines.append(f"ROOM TYPE: {room.room_type}")
    return "\n".join(lines) + "\n"


def _matches(field_value: str, marker: str) -> bool:
    return field_value.upper().startswith(marker)


def _parse_room_type(value: str) -> Optional[str]:
    for room_type in ROOM_TYPES:
        if _matches(value, room_type):
            return room_type
    return None


def parse_record(name: str, lines: Iterable[str], known_names: Sequence[str]) -> Room:
    """Build a Room from record lines.

    The name comes from the filename; connections only resolve to names in
    ``known_names``. Lines that are too short or unrecognized are skipped.
    """
    room = Room(name=name)
    known = set(known_names)
    for line in lines:
        fields = line.split()
        if len(fields) < 3:
            continue
        first, second, third = fields[:3]
        if _matches(second, NAME_MARKER):
            continue
        if _matches(second, TYPE_MARKER):
            room_type = _parse_room_type(third)
            if room_type is not None:
                room.room_type = room_type
        elif _matches(first, CONNECTION_MARKER):
            if third in known:
                room.connect(third)
    return room
