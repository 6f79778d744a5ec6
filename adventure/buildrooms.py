#!/usr/bin/env python3
"""
Room builder: generates a fresh room set for the adventure.
- Picks uniquely named rooms from the name pool.
- Marks one START_ROOM and one END_ROOM; the rest are MID_ROOM.
- Wires random undirected connections, then writes one record per room
  into ``<dir_prefix>.<pid>`` under the working directory.
Usage: python3 -m adventure.buildrooms
"""

from __future__ import annotations

import os
import random
import sys
from pathlib import Path
from typing import Dict, List, Sequence

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
    from adventure.rooms import END_ROOM, START_ROOM, Room, format_record, link
    from adventure.settings import SETTINGS_FILENAME, Settings, load_settings
else:
    from .rooms import END_ROOM, START_ROOM, Room, format_record, link
    from .settings import SETTINGS_FILENAME, Settings, load_settings

START_INDEX = 0


class GenerationError(Exception):
    """Raised when a room set cannot be generated or written."""


def pick_names(pool: Sequence[str], count: int, rng: random.Random) -> List[str]:
    if count > len(pool):
        raise GenerationError(
            f"Cannot pick {count} unique names from a pool of {len(pool)}."
        )
    indices = list(range(len(pool)))
    rng.shuffle(indices)
    return [pool[i] for i in indices[:count]]


def assign_roles(rooms: List[Room], rng: random.Random) -> None:
    rooms[START_INDEX].room_type = START_ROOM
    others = [i for i in range(len(rooms)) if i != START_INDEX]
    rooms[rng.choice(others)].room_type = END_ROOM


def _eligible_targets(rooms: List[Room], index: int, max_connections: int) -> List[int]:
    room = rooms[index]
    targets = []
    for j, other in enumerate(rooms):
        if j == index:
            continue
        if room.is_connected(other.name):
            targets.append(j)
        elif len(room.connections) < max_connections and len(other.connections) < max_connections:
            targets.append(j)
    return targets


def connect_rooms(rooms: List[Room], settings: Settings, rng: random.Random) -> Dict[str, int]:
    """Wire each room with ``min_connections`` connection attempts.

    Every draw counts as an attempt, even when it lands on a room that is
    already connected, so a room can finish with fewer distinct connections
    than the minimum. Returns the attempt count for each room.
    """
    attempts: Dict[str, int] = {}
    for index, room in enumerate(rooms):
        made = 0
        while made < settings.min_connections:
            targets = _eligible_targets(rooms, index, settings.max_connections)
            if not targets:
                raise GenerationError(
                    f"Room '{room.name}' has no room left to connect to "
                    f"(max_connections={settings.max_connections})."
                )
            link(room, rooms[rng.choice(targets)])
            made += 1
        attempts[room.name] = made
    return attempts


def build_rooms(settings: Settings, rng: random.Random | None = None) -> List[Room]:
    rng = rng or random.Random(settings.seed)
    names = pick_names(settings.name_pool, settings.room_count, rng)
    rooms = [Room(name=name) for name in names]
    assign_roles(rooms, rng)
    connect_rooms(rooms, settings, rng)
    return rooms


def room_dir_name(prefix: str, pid: int | None = None) -> str:
    return f"{prefix}.{os.getpid() if pid is None else pid}"


def write_room_set(rooms: Sequence[Room], directory: Path | str) -> Path:
    directory = Path(directory)
    try:
        directory.mkdir(mode=0o755)
    except OSError as exc:
        raise GenerationError(f"Unable to create room directory {directory}: {exc}") from exc

    ordered_names = [room.name for room in rooms]
    for room in rooms:
        record_path = directory / room.name
        try:
            with record_path.open("w", encoding="utf-8") as handle:
                handle.write(format_record(room, ordered_names))
        except OSError as exc:
            raise GenerationError(f"Unable to create file {record_path}: {exc}") from exc
    return directory


def main(base_dir: Path | str | None = None) -> int:
    base = Path.cwd() if base_dir is None else Path(base_dir)
    settings = load_settings(base / SETTINGS_FILENAME)
    try:
        rooms = build_rooms(settings)
        directory = write_room_set(rooms, base / room_dir_name(settings.dir_prefix))
    except GenerationError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1
    print(f"[Rooms] Wrote {len(rooms)} rooms to {directory.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
