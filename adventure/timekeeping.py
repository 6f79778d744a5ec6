"""Timekeeping side channel for the adventure session.

One writer task stamps the current time into the time file; the session
reads it back on demand. Both sides share a single ``asyncio.Lock``. The
session holds the lock between queries, so the parked writer only runs when
a query releases it.
"""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

TIME_FORMAT = "%I:%M%p, %A, %B %d, %Y"


class TimeKeeperError(Exception):
    """Raised when the time side channel is driven out of order."""


def format_timestamp(moment: datetime) -> str:
    # Unpadded hour, e.g. "1:03PM, Monday, October 19, 2026".
    return moment.strftime(TIME_FORMAT).lstrip("0")


def parse_timestamp(text: str) -> datetime:
    return datetime.strptime(text.strip(), TIME_FORMAT)


class TimeKeeper:
    def __init__(
        self,
        path: Path | str,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.path = Path(path)
        self.clock = clock
        self._lock = asyncio.Lock()
        self._writer: Optional[asyncio.Task] = None
        self._holding = False

    @property
    def writer_pending(self) -> bool:
        return self._writer is not None and not self._writer.done()

    async def start(self) -> None:
        if self._holding:
            raise TimeKeeperError("time keeper already started.")
        await self._lock.acquire()
        self._holding = True
        self._spawn_writer()

    def _spawn_writer(self) -> None:
        if self.writer_pending:
            raise TimeKeeperError("a time write is already in flight.")
        self._writer = asyncio.create_task(self._write_time())

    async def _write_time(self) -> str:
        async with self._lock:
            stamp = format_timestamp(self.clock())
            await asyncio.to_thread(self.path.write_text, stamp, encoding="utf-8")
            return stamp

    def _read_time(self) -> str:
        return self.path.read_text(encoding="utf-8").strip()

    async def query(self) -> str:
        """Let the parked writer run, then read its value under the lock."""
        if not self._holding:
            raise TimeKeeperError("time keeper is not running.")
        self._lock.release()
        self._holding = False
        try:
            if self._writer is not None:
                await self._writer
        finally:
            await self._lock.acquire()
            self._holding = True
        stamp = await asyncio.to_thread(self._read_time)
        self._spawn_writer()
        return stamp

    async def close(self) -> None:
        writer, self._writer = self._writer, None
        if writer is not None and not writer.done():
            writer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await writer
        if self._holding:
            self._lock.release()
            self._holding = False
