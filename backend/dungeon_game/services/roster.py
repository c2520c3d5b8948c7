from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from .mazegen import Point


class Direction(Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'

    @classmethod
    def parse(cls, token) -> Optional['Direction']:
        """Return the direction for a wire token, or None if it is not one."""
        if not isinstance(token, str):
            return None
        try:
            return cls(token)
        except ValueError:
            return None

    @property
    def offset(self) -> Tuple[int, int]:
        return _OFFSETS[self]

    def step(self, position: Point) -> Point:
        dx, dy = self.offset
        return Point(position.x + dx, position.y + dy)


_OFFSETS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


@dataclass
class Player:
    sid: str
    name: str
    x: int
    y: int
    facing: Direction = Direction.DOWN
    # Session generation the position was last validated against
    generation: int = 0

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'facing': self.facing.value,
            'id': self.sid,
            'name': self.name,
        }


class Roster:
    """Live players keyed by connection id, kept in join order."""

    def __init__(self):
        self._players: Dict[str, Player] = {}
        # Never reset: default names stay unique for the server's lifetime
        self._joined = 0

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, sid) -> bool:
        return sid in self._players

    def get(self, sid: str) -> Optional[Player]:
        return self._players.get(sid)

    def join(self, sid: str, session) -> Player:
        existing = self._players.get(sid)
        if existing is not None:
            return existing
        self._joined += 1
        player = Player(
            sid=sid,
            name=f"Player {self._joined}",
            x=session.start.x,
            y=session.start.y,
            generation=session.generation,
        )
        self._players[sid] = player
        return player

    def leave(self, sid: str) -> Optional[Player]:
        return self._players.pop(sid, None)

    def rename(self, sid: str, name: str) -> bool:
        player = self._players.get(sid)
        if player is None:
            return False
        player.name = name
        return True

    def place(self, sid: str, position: Point, facing: Direction, generation: int) -> None:
        player = self._players[sid]
        player.x, player.y = position
        player.facing = facing
        player.generation = generation

    def reset_all(self, session) -> None:
        for player in self._players.values():
            self.place(player.sid, session.start, Direction.DOWN, session.generation)

    def snapshot(self) -> Tuple[Player, ...]:
        """Copies of every player, in join order."""
        return tuple(replace(p) for p in self._players.values())
