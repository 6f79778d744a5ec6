#!/usr/bin/env python3
"""Validate a generated room set for structural mistakes."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from adventure.room_store import RoomStoreError, find_latest_room_dir, load_room_set
from adventure.rooms import END_ROOM, START_ROOM, Room
from adventure.settings import SETTINGS_FILENAME, Settings, load_settings


def validate_rooms(rooms: Sequence[Room], settings: Settings) -> List[str]:
    errors: List[str] = []
    names = [room.name for room in rooms]
    by_name = {room.name: room for room in rooms}

    if len(by_name) != len(names):
        errors.append("rooms: duplicate room names.")
    if len(rooms) != settings.room_count:
        errors.append(f"rooms: expected {settings.room_count} rooms, found {len(rooms)}.")
    for room_type in (START_ROOM, END_ROOM):
        count = sum(1 for room in rooms if room.room_type == room_type)
        if count != 1:
            errors.append(f"rooms: expected exactly one {room_type}, found {count}.")

    pool = set(settings.name_pool)
    for room in rooms:
        if room.name not in pool:
            errors.append(f"rooms.{room.name}: name is not in the name pool.")
        if len(room.connections) > settings.max_connections:
            errors.append(
                f"rooms.{room.name}: {len(room.connections)} connections exceeds "
                f"max_connections={settings.max_connections}."
            )
        if not room.connections:
            errors.append(f"rooms.{room.name}: room has no connections.")
        for target in room.connections:
            if target == room.name:
                errors.append(f"rooms.{room.name}: room connects to itself.")
                continue
            other = by_name.get(target)
            if other is None:
                errors.append(f"rooms.{room.name}: connection to missing room {target}.")
            elif not other.is_connected(room.name):
                errors.append(
                    f"rooms.{room.name}: connection to {target} is not mirrored."
                )
    return errors


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate a generated room set.")
    parser.add_argument(
        "room_dir",
        nargs="?",
        default=None,
        help="Room-set directory (default: the latest one in the working directory).",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str]) -> None:
    args = parse_args(argv[1:])
    settings = load_settings(Path.cwd() / SETTINGS_FILENAME)
    try:
        if args.room_dir:
            room_dir = Path(args.room_dir).resolve()
        else:
            room_dir = find_latest_room_dir(Path.cwd(), settings.dir_prefix)
        room_set = load_room_set(room_dir)
    except RoomStoreError as exc:
        print(f"Failed to load room set: {exc}")
        sys.exit(1)

    errors = validate_rooms(room_set.rooms, settings)
    if errors:
        print("Validation failed (path: message):")
        for err in errors:
            print(f" - {err}")
        sys.exit(1)

    print(f"Validation passed for {room_dir}.")


if __name__ == "__main__":
    main(sys.argv)
