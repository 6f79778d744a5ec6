import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from adventure.room_store import find_latest_room_dir, load_room_set
from adventure.settings import SETTINGS_FILENAME, load_settings


def build_graph(rooms) -> dict:
    names = {room.name for room in rooms}
    graph = {room.name: [] for room in rooms}
    for room in rooms:
        for target in room.connections:
            if target in names:
                graph[room.name].append(target)
    return graph


def traverse_from(start_room: str, graph: dict) -> set:
    if start_room not in graph:
        return set()
    visited = set()
    stack = [start_room]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        stack.extend(graph.get(current, []))
    return visited


def main() -> None:
    if len(sys.argv) > 1:
        room_dir = Path(sys.argv[1])
    else:
        settings = load_settings(Path.cwd() / SETTINGS_FILENAME)
        room_dir = find_latest_room_dir(Path.cwd(), settings.dir_prefix)
    rooms = load_room_set(room_dir).rooms
    graph = build_graph(rooms)

    starts = [room.name for room in rooms if room.is_start]
    ends = [room.name for room in rooms if room.is_end]

    reached = set()
    for start in starts:
        reached.update(traverse_from(start, graph))

    unreachable = sorted(set(graph.keys()) - reached)

    print(f"Room directory: {room_dir}")
    print(f"Total rooms: {len(graph)}")
    print(f"Reachable rooms: {len(reached)}")
    if unreachable:
        print("Unreachable rooms:")
        for name in unreachable:
            print(f"  - {name}")
    else:
        print("All rooms reachable from the start room.")
    if ends and not any(end in reached for end in ends):
        print("End room is NOT reachable from the start room.")


if __name__ == "__main__":
    main()
