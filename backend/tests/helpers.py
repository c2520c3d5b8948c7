"""Test doubles shared by the unit and integration tests."""

from itertools import cycle

from dungeon_game.services.leaderboard import ScoreRecord, StoreError
from dungeon_game.services.mazegen import GeneratedDungeon, Room


def dungeon_from_rows(rows, rooms, room_size=1):
    grid = tuple(tuple(int(c) for c in row) for row in rows)
    return GeneratedDungeon(
        width=len(grid[0]),
        height=len(grid),
        grid=grid,
        rooms=tuple(rooms),
        room_size=room_size,
        next_room_id=max(r.id for r in rooms) + 1,
    )


# Start (1, 1) in room 2, goal (5, 1) in room 3, straight corridor between.
CORRIDOR_EAST = dungeon_from_rows(
    ['0000000',
     '0211130',
     '0000000'],
    [Room(id=2, x=1, y=1, w=1, h=1), Room(id=3, x=5, y=1, w=1, h=1)],
)

# Mirror image: start (5, 1), goal (1, 1).
CORRIDOR_WEST = dungeon_from_rows(
    ['0000000',
     '0311120',
     '0000000'],
    [Room(id=2, x=5, y=1, w=1, h=1), Room(id=3, x=1, y=1, w=1, h=1)],
)

SINGLE_ROOM = dungeon_from_rows(
    ['000',
     '020',
     '000'],
    [Room(id=2, x=1, y=1, w=1, h=1)],
)


class StaticMazeGenerator:
    """Hands out prepared layouts in order, cycling forever."""

    def __init__(self, *layouts):
        self._layouts = cycle(layouts or (CORRIDOR_EAST, CORRIDOR_WEST))
        self.calls = []

    def generate(self, width, height, room_count, avg_room_size):
        self.calls.append((width, height, room_count, avg_room_size))
        return next(self._layouts)


class RecordingBroadcaster:
    def __init__(self):
        self.sent = []

    def emit(self, event, payload, to=None):
        self.sent.append((event, payload, to))

    def events(self):
        return [(event, to) for event, _, to in self.sent]

    def last(self, event):
        for name, payload, _ in reversed(self.sent):
            if name == event:
                return payload
        return None

    def clear(self):
        self.sent.clear()


class MemoryStore:
    def __init__(self, records=()):
        self.rows = list(records)
        self.fail_inserts = False
        self.fail_selects = False

    def insert(self, record: ScoreRecord):
        if self.fail_inserts:
            raise StoreError('insert failed: database is down')
        if any(r.entry_id == record.entry_id for r in self.rows):
            raise StoreError(f"insert failed: UNIQUE constraint failed: entryId={record.entry_id}")
        self.rows.append(record)

    def select_all(self):
        if self.fail_selects:
            raise StoreError('select failed: database is down')
        return sorted(self.rows, key=lambda r: r.entry_id)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
