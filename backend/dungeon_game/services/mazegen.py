"""Maze generator adapter.

The game loop only depends on :class:`GeneratedDungeon` and on an object with
a ``generate(width, height, room_count, avg_room_size)`` method. Anything that
honours that contract can stand in for :class:`RandomMazeGenerator` (tests use
hand-built layouts).

Grid cells are plain integers so the grid can be sent to clients as-is:
``0`` is wall, ``1`` is corridor and ``n >= 2`` belongs to room ``n``.
"""

from collections import deque
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Set, Tuple
import random

WALL = 0
CORRIDOR = 1
FIRST_ROOM_ID = 2


class GenerationError(Exception):
    """Raised when a dungeon cannot be generated from the given parameters."""


class Point(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class Room:
    id: int
    x: int
    y: int
    w: int
    h: int

    @property
    def cx(self) -> int:
        return self.x + self.w // 2

    @property
    def cy(self) -> int:
        return self.y + self.h // 2

    @property
    def center(self) -> Point:
        return Point(self.cx, self.cy)

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h

    def overlaps(self, other: 'Room', margin: int = 1) -> bool:
        return (self.x < other.x + other.w + margin and other.x < self.x + self.w + margin and
                self.y < other.y + other.h + margin and other.y < self.y + self.h + margin)

    def to_dict(self):
        return {
            'id': self.id,
            'h': self.h,
            'w': self.w,
            'x': self.x,
            'y': self.y,
            'cx': self.cx,
            'cy': self.cy,
        }


@dataclass(frozen=True)
class GeneratedDungeon:
    """Raw generator output: grid (indexed [y][x]), rooms in generation order."""
    width: int
    height: int
    grid: Tuple[Tuple[int, ...], ...]
    rooms: Tuple[Room, ...]
    room_size: int
    next_room_id: int

    @property
    def last_room_id(self) -> int:
        return self.next_room_id - 1

    def room(self, room_id: int) -> Optional[Room]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def cell(self, x: int, y: int) -> int:
        return self.grid[y][x]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_walkable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.grid[y][x] != WALL

    def to_dict(self):
        return {
            'maze': [list(row) for row in self.grid],
            'h': self.height,
            'w': self.width,
            'rooms': [room.to_dict() for room in self.rooms],
            'roomSize': self.room_size,
            '_lastRoomId': self.next_room_id,
        }


def _check_positive(**params) -> None:
    for name, value in params.items():
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise GenerationError(f"{name} must be a positive integer, got {value!r}")


class RandomMazeGenerator:
    """Rooms-and-corridors generator.

    Rooms are rectangles placed at random with at least one wall cell
    between them; each room is then joined to the previously generated one
    by an L-shaped corridor, so every room is reachable from room 2.
    Placement is best effort: crowded grids end up with fewer rooms than
    requested.
    """

    def __init__(self, seed=None, attempts_per_room: int = 50):
        self._rng = random.Random(seed)
        self.attempts_per_room = attempts_per_room

    def generate(self, width: int, height: int, room_count: int, avg_room_size: int) -> GeneratedDungeon:
        _check_positive(width=width, height=height, room_count=room_count, avg_room_size=avg_room_size)
        grid = [[WALL] * width for _ in range(height)]
        rooms: List[Room] = []
        next_id = FIRST_ROOM_ID

        attempts = room_count * self.attempts_per_room
        while len(rooms) < room_count and attempts > 0:
            attempts -= 1
            room = self._propose_room(next_id, width, height, avg_room_size)
            if room is None:
                break
            if any(room.overlaps(other) for other in rooms):
                continue
            for y in range(room.y, room.y + room.h):
                for x in range(room.x, room.x + room.w):
                    grid[y][x] = room.id
            rooms.append(room)
            next_id += 1

        if not rooms:
            raise GenerationError(
                f"could not place any room in a {width}x{height} grid (avg_room_size={avg_room_size})"
            )

        for prev, room in zip(rooms, rooms[1:]):
            self._carve_corridor(grid, prev.center, room.center)

        return GeneratedDungeon(
            width=width,
            height=height,
            grid=tuple(tuple(row) for row in grid),
            rooms=tuple(rooms),
            room_size=avg_room_size,
            next_room_id=next_id,
        )

    def _propose_room(self, room_id: int, width: int, height: int, avg_room_size: int) -> Optional[Room]:
        # Keep a one-cell wall border around the whole grid
        max_w = min(avg_room_size, width - 2)
        max_h = min(avg_room_size, height - 2)
        if max_w < 1 or max_h < 1:
            return None
        min_side = max(1, avg_room_size // 2)
        w = self._rng.randint(min(min_side, max_w), max_w)
        h = self._rng.randint(min(min_side, max_h), max_h)
        x = self._rng.randint(1, width - w - 1)
        y = self._rng.randint(1, height - h - 1)
        return Room(id=room_id, x=x, y=y, w=w, h=h)

    def _carve_corridor(self, grid: List[List[int]], start: Point, end: Point) -> None:
        if self._rng.random() < 0.5:
            corner = Point(end.x, start.y)
        else:
            corner = Point(start.x, end.y)
        for a, b in ((start, corner), (corner, end)):
            for x in range(min(a.x, b.x), max(a.x, b.x) + 1):
                for y in range(min(a.y, b.y), max(a.y, b.y) + 1):
                    if grid[y][x] == WALL:
                        grid[y][x] = CORRIDOR


def reachable_from(grid: Sequence[Sequence[int]], start: Point) -> Set[Point]:
    """Flood fill over non-wall cells (4-neighbourhood)."""
    height = len(grid)
    width = len(grid[0]) if height else 0
    if not (0 <= start.x < width and 0 <= start.y < height) or grid[start.y][start.x] == WALL:
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height and grid[ny][nx] != WALL:
                p = Point(nx, ny)
                if p not in seen:
                    seen.add(p)
                    queue.append(p)
    return seen
