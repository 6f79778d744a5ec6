import random
from pathlib import Path

import pytest

from adventure import buildrooms
from adventure.buildrooms import (
    GenerationError,
    build_rooms,
    connect_rooms,
    pick_names,
    write_room_set,
)
from adventure.rooms import END_ROOM, MID_ROOM, START_ROOM, Room, link
from adventure.settings import DEFAULT_NAME_POOL, Settings


class FirstChoiceRandom(random.Random):
    """Always draws the first candidate and never shuffles."""

    def choice(self, seq):
        return seq[0]

    def shuffle(self, x):
        return None


@pytest.mark.parametrize("seed", range(40))
def test_generated_rooms_hold_invariants(seed: int) -> None:
    settings = Settings(seed=seed)
    rooms = build_rooms(settings)

    names = [room.name for room in rooms]
    assert len(rooms) == settings.room_count
    assert len(set(names)) == len(names)
    assert set(names) <= set(DEFAULT_NAME_POOL)

    types = [room.room_type for room in rooms]
    assert types.count(START_ROOM) == 1
    assert types.count(END_ROOM) == 1
    assert types.count(MID_ROOM) == len(rooms) - 2
    assert rooms[0].room_type == START_ROOM

    by_name = {room.name: room for room in rooms}
    for room in rooms:
        assert room.name not in room.connections
        assert 1 <= len(room.connections) <= settings.max_connections
        for target in room.connections:
            assert by_name[target].is_connected(room.name)


def test_connect_rooms_counts_every_draw_as_an_attempt() -> None:
    settings = Settings()
    rooms = [Room(name=name) for name in DEFAULT_NAME_POOL[: settings.room_count]]

    attempts = connect_rooms(rooms, settings, FirstChoiceRandom())

    assert set(attempts.values()) == {settings.min_connections}
    # The second room keeps drawing the room it is already linked to, so it
    # ends with a single distinct connection despite three attempts.
    assert rooms[1].connections == [rooms[0].name]
    assert len(rooms[1].connections) < settings.min_connections
    assert len(rooms[0].connections) == settings.room_count - 1


def test_connect_rooms_respects_max_connections() -> None:
    settings = Settings(room_count=7, min_connections=2, max_connections=3).clamp()
    for seed in range(30):
        try:
            rooms = build_rooms(settings.copy(), random.Random(seed))
        except GenerationError:
            continue
        assert all(len(room.connections) <= 3 for room in rooms)


def test_connect_rooms_raises_when_no_target_is_left() -> None:
    settings = Settings(room_count=3, min_connections=1, max_connections=1).clamp()
    rooms = [Room(name="a"), Room(name="b"), Room(name="c")]
    link(rooms[1], rooms[2])

    with pytest.raises(GenerationError, match="no room left"):
        connect_rooms(rooms, settings, random.Random(0))


def test_pick_names_draws_without_replacement() -> None:
    names = pick_names(DEFAULT_NAME_POOL, 10, random.Random(3))
    assert sorted(names) == sorted(DEFAULT_NAME_POOL)

    with pytest.raises(GenerationError):
        pick_names(["a", "b"], 3, random.Random(0))


def test_write_room_set_lists_connections_in_room_order(tmp_path: Path) -> None:
    rooms = [
        Room(name="desert", room_type=START_ROOM),
        Room(name="shop"),
        Room(name="castle", room_type=END_ROOM),
    ]
    link(rooms[0], rooms[2])
    link(rooms[0], rooms[1])

    directory = write_room_set(rooms, tmp_path / "adventure.rooms.1")

    assert (directory / "desert").read_text(encoding="utf-8") == (
        "ROOM NAME: desert\n"
        "CONNECTION 1: shop\n"
        "CONNECTION 2: castle\n"
        "ROOM TYPE: START_ROOM\n"
    )
    assert (directory / "castle").read_text(encoding="utf-8").endswith("ROOM TYPE: END_ROOM\n")


def test_write_room_set_fails_when_directory_cannot_be_created(tmp_path: Path) -> None:
    blocker = tmp_path / "adventure.rooms.1"
    blocker.write_text("not a directory")

    with pytest.raises(GenerationError, match="Unable to create"):
        write_room_set([Room(name="desert")], blocker)


def test_main_writes_room_directory(tmp_path: Path, capsys) -> None:
    assert buildrooms.main(tmp_path) == 0

    dirs = [entry for entry in tmp_path.iterdir() if entry.is_dir()]
    assert len(dirs) == 1
    assert dirs[0].name == buildrooms.room_dir_name("adventure.rooms")
    assert len(list(dirs[0].iterdir())) == 7
    assert "[Rooms] Wrote 7 rooms" in capsys.readouterr().out


def test_write_room_set_refuses_existing_directory(tmp_path: Path) -> None:
    room_dir = tmp_path / "adventure.rooms.1"
    write_room_set(build_rooms(Settings(), random.Random(1)), room_dir)
    before = sorted(entry.name for entry in room_dir.iterdir())

    with pytest.raises(GenerationError, match="Unable to create room directory"):
        write_room_set(build_rooms(Settings(), random.Random(2)), room_dir)

    assert sorted(entry.name for entry in room_dir.iterdir()) == before


def test_write_room_set_fails_when_a_record_cannot_be_opened(tmp_path: Path, monkeypatch) -> None:
    rooms = [Room(name="desert", room_type=START_ROOM), Room(name="shop", room_type=END_ROOM)]
    link(rooms[0], rooms[1])
    room_dir = tmp_path / "adventure.rooms.1"

    original_open = Path.open

    def refuse_shop(self, *args, **kwargs):
        if self.name == "shop":
            raise PermissionError(13, "Permission denied", str(self))
        return original_open(self, *args, **kwargs)

    monkeypatch.setattr(Path, "open", refuse_shop)
    with pytest.raises(GenerationError, match="Unable to create file"):
        write_room_set(rooms, room_dir)

    monkeypatch.undo()
    assert (room_dir / "desert").exists()
    assert not (room_dir / "shop").exists()
