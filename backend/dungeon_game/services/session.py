import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .mazegen import FIRST_ROOM_ID, GeneratedDungeon, GenerationError, Point


@dataclass(frozen=True)
class GenerationConfig:
    width: int
    height: int
    room_count: int
    avg_room_size: int

    @classmethod
    def from_mapping(cls, config) -> 'GenerationConfig':
        """Build from a Flask config (or any mapping with DUNGEON_* keys).

        Environment values arrive as strings; anything that does not parse
        as an integer raises GenerationError like any other bad parameter.
        """
        return cls(
            width=_as_int('DUNGEON_WIDTH', config.get('DUNGEON_WIDTH', 20)),
            height=_as_int('DUNGEON_HEIGHT', config.get('DUNGEON_HEIGHT', 20)),
            room_count=_as_int('DUNGEON_ROOM_COUNT', config.get('DUNGEON_ROOM_COUNT', 7)),
            avg_room_size=_as_int('DUNGEON_AVG_ROOM_SIZE', config.get('DUNGEON_AVG_ROOM_SIZE', 8)),
        )


def _as_int(name: str, value):
    if not isinstance(value, str):
        # Non-strings are validated by the generator
        return value
    try:
        return int(value.strip())
    except ValueError:
        raise GenerationError(f"{name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class DungeonSession:
    """One playable level. Never mutated; a new level is a new session."""
    dungeon: GeneratedDungeon
    start: Point
    end: Point
    created_at: float
    generation: int

    @property
    def width(self) -> int:
        return self.dungeon.width

    @property
    def height(self) -> int:
        return self.dungeon.height

    def is_walkable(self, x: int, y: int) -> bool:
        return self.dungeon.is_walkable(x, y)

    def to_payload(self):
        return {
            'dungeon': self.dungeon.to_dict(),
            'startingPoint': self.start._asdict(),
            'endingPoint': self.end._asdict(),
        }


class SessionManager:
    """Owns the active :class:`DungeonSession` and replaces it on demand."""

    def __init__(self, generator, config: GenerationConfig,
                 clock: Callable[[], float] = time.monotonic, logger=None):
        self._generator = generator
        self.config = config
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._current: Optional[DungeonSession] = None
        self._generation = 0

    def regenerate(self) -> DungeonSession:
        cfg = self.config
        dungeon = self._generator.generate(cfg.width, cfg.height, cfg.room_count, cfg.avg_room_size)
        if dungeon.width != cfg.width or dungeon.height != cfg.height:
            raise GenerationError(
                f"generator returned a {dungeon.width}x{dungeon.height} grid, expected {cfg.width}x{cfg.height}"
            )
        first = dungeon.room(FIRST_ROOM_ID)
        last = dungeon.room(dungeon.last_room_id)
        if first is None or last is None:
            raise GenerationError(f"generator returned no usable rooms (next id {dungeon.next_room_id})")
        if first.id == last.id:
            self._logger.warning("[session] only one room generated; start and end coincide")

        self._generation += 1
        session = DungeonSession(
            dungeon=dungeon,
            start=first.center,
            end=last.center,
            created_at=self._clock(),
            generation=self._generation,
        )
        # Single reference swap: readers see either the old or the new session
        self._current = session
        self._logger.info(
            f"[session] generation={session.generation} rooms={len(dungeon.rooms)} "
            f"start={tuple(session.start)} end={tuple(session.end)}"
        )
        return session

    def current(self) -> DungeonSession:
        if self._current is None:
            raise RuntimeError('no dungeon session has been generated yet')
        return self._current
