"""Locate and load generated room sets."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .rooms import Room, parse_record


class RoomStoreError(Exception):
    """Raised when a room set cannot be located or read."""


class RoomSetNotFoundError(RoomStoreError):
    """Raised when no room-set directory exists to play."""


@dataclass
class RoomSet:
    directory: Path
    rooms: List[Room]

    @property
    def names(self) -> List[str]:
        return [room.name for room in self.rooms]


def find_latest_room_dir(base_dir: Path | str, prefix: str) -> Path:
    """Return the most recently modified directory whose name starts with ``prefix``.

    Ties go to the last directory in sorted enumeration order.
    """
    base_dir = Path(base_dir)
    try:
        entries = sorted(base_dir.iterdir())
    except OSError as exc:
        raise RoomSetNotFoundError(f"Unable to list {base_dir}: {exc}") from exc

    latest: Optional[Path] = None
    latest_mtime = 0.0
    for entry in entries:
        if not entry.name.startswith(prefix) or not entry.is_dir():
            continue
        mtime = entry.stat().st_mtime
        if latest is None or mtime >= latest_mtime:
            latest = entry
            latest_mtime = mtime
    if latest is None:
        raise RoomSetNotFoundError(
            f"No '{prefix}' directory found in {base_dir}. "
            "Please run buildrooms before playing."
        )
    return latest


def list_room_files(directory: Path | str) -> List[Path]:
    directory = Path(directory)
    try:
        return sorted(entry for entry in directory.iterdir() if entry.is_file())
    except OSError as exc:
        raise RoomStoreError(f"Unable to open dir {directory}: {exc}") from exc


def load_room_set(directory: Path | str) -> RoomSet:
    directory = Path(directory)
    files = list_room_files(directory)
    names = [path.name for path in files]
    rooms = []
    for path in files:
        try:
            with path.open("r", encoding="utf-8") as handle:
                rooms.append(parse_record(path.name, handle, names))
        except (OSError, UnicodeDecodeError) as exc:
            raise RoomStoreError(f"Unable to open file {path}: {exc}") from exc
    return RoomSet(directory=directory, rooms=rooms)


def load_latest_room_set(base_dir: Path | str, prefix: str) -> RoomSet:
    return load_room_set(find_latest_room_dir(base_dir, prefix))
