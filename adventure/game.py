#!/usr/bin/env python3
"""
Room Adventure: navigation
- Loads the most recently built room set from the working directory.
- Start in the START_ROOM; win by entering the END_ROOM.
- Type a connected room name to move, or "time" for the current time.
Usage: python3 -m adventure.game
"""

import asyncio
import inspect
import sys
from pathlib import Path

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
    from adventure.room_store import RoomStoreError, load_latest_room_set
    from adventure.rooms import START_ROOM, RoomSetInvariantError, find_room, rooms_by_name
    from adventure.settings import SETTINGS_FILENAME, TIME_COMMAND, load_settings
    from adventure.timekeeping import TimeKeeper
else:
    from .room_store import RoomStoreError, load_latest_room_set
    from .rooms import START_ROOM, RoomSetInvariantError, find_room, rooms_by_name
    from .settings import SETTINGS_FILENAME, TIME_COMMAND, load_settings
    from .timekeeping import TimeKeeper

ROOM_ERROR = "HUH? I DON’T UNDERSTAND THAT ROOM. TRY AGAIN."
PROMPT = "WHERE TO? >"

MOVE = "move"
TIME = "time"
INVALID = "invalid"


def emit_print(*args, **kwargs) -> None:
    print(*args, **kwargs)


async def read_input(prompt: str = "") -> str:
    return await asyncio.to_thread(input, prompt)


async def _resolve_input(input_func, prompt: str) -> str:
    result = input_func(prompt)
    if inspect.isawaitable(result):
        return await result
    return result


class NavigationSession:
    def __init__(self, rooms):
        self.rooms = rooms_by_name(rooms)
        if len(self.rooms) != len(rooms):
            raise RoomSetInvariantError("room names must be unique.")
        self.current = find_room(rooms, START_ROOM)
        self.path = []

    @property
    def finished(self):
        return self.current.is_end

    @property
    def steps(self):
        return len(self.path)

    def connections(self):
        return [name for name in self.current.connections if name in self.rooms]

    def classify(self, text):
        if text in self.connections():
            return MOVE
        if text == TIME_COMMAND:
            return TIME
        return INVALID

    def move(self, name):
        if self.classify(name) != MOVE:
            return False
        self.current = self.rooms[name]
        self.path.append(name)
        return True


def render_location(session, print_func=emit_print):
    print_func(f"CURRENT LOCATION: {session.current.name}")
    print_func(f"POSSIBLE CONNECTIONS: {', '.join(session.connections())}.")


def render_victory(session, print_func=emit_print):
    print_func("YOU HAVE FOUND THE END ROOM. CONGRATULATIONS!")
    print_func(f"YOU TOOK {session.steps} STEPS. YOUR PATH TO VICTORY WAS:")
    for name in session.path:
        print_func(name)


async def play(session, time_keeper, *, input_func=read_input, print_func=emit_print):
    """Run the prompt loop until the END_ROOM is reached; return the path."""
    show_location = True
    while not session.finished:
        if show_location:
            render_location(session, print_func)
        choice = (await _resolve_input(input_func, PROMPT)).rstrip("\n")
        action = session.classify(choice)
        if action == MOVE:
            session.move(choice)
            show_location = True
            continue
        if action == TIME:
            stamp = await time_keeper.query()
            print_func(f"\n{stamp}\n")
            show_location = False
            continue
        print_func(f"\n{ROOM_ERROR}\n")
        show_location = True

    render_victory(session, print_func)
    return list(session.path)


async def main(base_dir=None, *, input_func=read_input, print_func=emit_print):
    base = Path.cwd() if base_dir is None else Path(base_dir)
    settings = load_settings(base / SETTINGS_FILENAME)
    room_set = load_latest_room_set(base, settings.dir_prefix)
    print_func(f"[Rooms] Loaded {len(room_set.rooms)} rooms from {room_set.directory.name}")
    session = NavigationSession(room_set.rooms)

    time_keeper = TimeKeeper(base / settings.time_filename)
    await time_keeper.start()
    try:
        return await play(session, time_keeper, input_func=input_func, print_func=print_func)
    finally:
        await time_keeper.close()


def run() -> int:
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, EOFError):
        emit_print("\n[Interrupted] Bye.")
        return 1
    except RoomStoreError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1
    except RoomSetInvariantError as exc:
        print(f"[Invariant] {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(run())
