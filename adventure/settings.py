"""Settings persistence for the room adventure."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

SETTINGS_FILENAME = "settings.json"
TIME_COMMAND = "time"

DEFAULT_NAME_POOL = (
    "desert",
    "shop",
    "castle",
    "field",
    "forest",
    "village",
    "mountain",
    "temple",
    "lake",
    "valley",
)
DEFAULT_ROOM_COUNT = 7
DEFAULT_MIN_CONNECTIONS = 3
DEFAULT_MAX_CONNECTIONS = 6
DEFAULT_DIR_PREFIX = "adventure.rooms"
DEFAULT_TIME_FILENAME = "currentTime.txt"


def _clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def _clean_pool(names: Any) -> List[str]:
    if isinstance(names, str) or not isinstance(names, (list, tuple)):
        return list(DEFAULT_NAME_POOL)
    pool: List[str] = []
    for name in names:
        if not isinstance(name, str):
            continue
        name = name.strip()
        # Record lines are whitespace-split, so names must be a single token.
        if not name or len(name.split()) != 1 or name == TIME_COMMAND:
            continue
        if name not in pool:
            pool.append(name)
    if len(pool) < 2:
        return list(DEFAULT_NAME_POOL)
    return pool


@dataclass
class Settings:
    """Generation and session knobs shared by both programs."""

    room_count: int = DEFAULT_ROOM_COUNT
    min_connections: int = DEFAULT_MIN_CONNECTIONS
    max_connections: int = DEFAULT_MAX_CONNECTIONS
    name_pool: List[str] = field(default_factory=lambda: list(DEFAULT_NAME_POOL))
    dir_prefix: str = DEFAULT_DIR_PREFIX
    time_filename: str = DEFAULT_TIME_FILENAME
    seed: Optional[int] = None

    def clamp(self) -> "Settings":
        self.name_pool = _clean_pool(self.name_pool)
        self.room_count = _clamp(int(self.room_count), 2, len(self.name_pool))
        self.min_connections = _clamp(int(self.min_connections), 1, self.room_count - 1)
        self.max_connections = max(int(self.max_connections), self.min_connections)

        prefix = str(self.dir_prefix).strip()
        if not prefix or os.sep in prefix:
            prefix = DEFAULT_DIR_PREFIX
        self.dir_prefix = prefix

        time_filename = str(self.time_filename).strip()
        if not time_filename or os.sep in time_filename:
            time_filename = DEFAULT_TIME_FILENAME
        self.time_filename = time_filename

        if self.seed is not None and not isinstance(self.seed, int):
            try:
                self.seed = int(self.seed)
            except (TypeError, ValueError):
                self.seed = None
        return self

    def copy(self) -> "Settings":
        return Settings.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Settings":
        if not isinstance(data, dict):
            return cls()

        def _as_int(key: str, default: int) -> int:
            try:
                return int(data.get(key, default))
            except (TypeError, ValueError):
                return default

        settings = cls(
            room_count=_as_int("room_count", DEFAULT_ROOM_COUNT),
            min_connections=_as_int("min_connections", DEFAULT_MIN_CONNECTIONS),
            max_connections=_as_int("max_connections", DEFAULT_MAX_CONNECTIONS),
            name_pool=data.get("name_pool", list(DEFAULT_NAME_POOL)),
            dir_prefix=str(data.get("dir_prefix", DEFAULT_DIR_PREFIX)),
            time_filename=str(data.get("time_filename", DEFAULT_TIME_FILENAME)),
            seed=data.get("seed"),
        )
        return settings.clamp()


def load_settings(path: Path | str = SETTINGS_FILENAME) -> Settings:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return Settings()
    except (OSError, json.JSONDecodeError, TypeError) as exc:
        print(f"[Settings] Ignoring unreadable {path}: {exc}", file=sys.stderr)
        return Settings()
    return Settings.from_dict(data)
