"""The authoritative game loop.

:class:`GameServer` owns the dungeon session, the roster and the leaderboard
cache. Every mutation happens under one lock and is followed by the
broadcasts it implies, so all clients observe the same order of events.
The only work done outside the lock is the hiscore write after a win.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

from dungeon_game.protocol import (
    Connect,
    Disconnect,
    DungeonData,
    HiscoreData,
    Move,
    PlayerData,
    UsernameUpdate,
)
from .leaderboard import LeaderboardCache, format_elapsed
from .mazegen import GenerationError
from .roster import Direction, Roster
from .session import GenerationConfig, SessionManager


class MoveOutcome(Enum):
    IGNORED = 'ignored'     # unknown connection or malformed direction
    REJECTED = 'rejected'   # out of bounds or into a wall
    ACCEPTED = 'accepted'
    WON = 'won'


class GameServer:
    def __init__(self, generator, config: GenerationConfig, store, broadcaster,
                 logger=None, clock: Callable[[], float] = time.monotonic):
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock
        self._broadcaster = broadcaster
        self._lock = threading.RLock()
        self.sessions = SessionManager(generator, config, clock=clock, logger=self.logger)
        self.roster = Roster()
        self.leaderboard = LeaderboardCache(store, logger=self.logger)

    def start(self) -> None:
        """Generate the first level and load the hiscores.

        Raises GenerationError if the configuration cannot produce a dungeon.
        """
        with self._lock:
            self.sessions.regenerate()
        self.leaderboard.load()

    # ---- inbound events ----

    def handle(self, message):
        if isinstance(message, Move):
            return self.move(message.sid, message.direction)
        if isinstance(message, UsernameUpdate):
            return self.rename(message.sid, message.name)
        if isinstance(message, Connect):
            return self.connect(message.sid)
        if isinstance(message, Disconnect):
            return self.disconnect(message.sid)
        self.logger.debug(f"[ignored] unexpected message {message!r}")
        return None

    def connect(self, sid: str):
        with self._lock:
            session = self.sessions.current()
            player = self.roster.join(sid, session)
            self._send(DungeonData(session), to=sid)
            self._send(HiscoreData(self.leaderboard.snapshot()), to=sid)
            self._broadcast_players()
        self.logger.info(f"[connect] player={sid} name={player.name!r} players={len(self.roster)}")
        return player

    def disconnect(self, sid: str) -> None:
        with self._lock:
            player = self.roster.leave(sid)
            if player is None:
                return
            self._broadcast_players()
        self.logger.info(f"[disconnect] player={sid} players={len(self.roster)}")

    def rename(self, sid: str, name: str) -> bool:
        with self._lock:
            if not self.roster.rename(sid, name):
                self.logger.debug(f"[ignored] rename for unknown player={sid}")
                return False
            self._broadcast_players()
        self.logger.info(f"[rename] player={sid} name={name!r}")
        return True

    def move(self, sid: str, direction) -> MoveOutcome:
        if not isinstance(direction, Direction):
            direction = Direction.parse(direction)
            if direction is None:
                self.logger.debug(f"[ignored] bad direction from player={sid}")
                return MoveOutcome.IGNORED

        with self._lock:
            player = self.roster.get(sid)
            if player is None:
                self.logger.debug(f"[ignored] move for unknown player={sid}")
                return MoveOutcome.IGNORED
            session = self.sessions.current()
            if player.generation != session.generation:
                # Position belongs to a replaced level
                self.roster.place(sid, session.start, Direction.DOWN, session.generation)

            target = direction.step(player.position)
            accepted = session.is_walkable(target.x, target.y)
            if accepted:
                # Facing only changes on a successful step
                self.roster.place(sid, target, direction, session.generation)
            self._broadcast_players()
            # Standing on the goal wins even after a bump, which keeps
            # single-room levels (start == end) winnable
            if player.position != session.end:
                return MoveOutcome.ACCEPTED if accepted else MoveOutcome.REJECTED

            winner_name, time_taken = self._finish_level(sid, player.name, session)

        if self.leaderboard.record(winner_name, time_taken) is not None:
            self._send(HiscoreData(self.leaderboard.snapshot()))
        return MoveOutcome.WON

    # ---- snapshots ----

    def state(self):
        with self._lock:
            return {
                DungeonData.event: DungeonData(self.sessions.current()).to_payload(),
                PlayerData.event: PlayerData(self.roster.snapshot()).to_payload(),
                HiscoreData.event: HiscoreData(self.leaderboard.snapshot()).to_payload(),
            }

    # ---- internals ----

    def _finish_level(self, sid: str, name: str, session):
        elapsed_ms = int((self._clock() - session.created_at) * 1000)
        time_taken = format_elapsed(elapsed_ms)
        self.logger.info(f"[win] player={sid} name={name!r} time={time_taken} elapsed_ms={elapsed_ms}")
        try:
            fresh = self.sessions.regenerate()
        except GenerationError:
            self.logger.exception('[session-error] regeneration failed; keeping the current level')
            fresh = session
        self.roster.reset_all(fresh)
        self._send(DungeonData(fresh))
        self._broadcast_players()
        return name, time_taken

    def _broadcast_players(self) -> None:
        self._send(PlayerData(self.roster.snapshot()))

    def _send(self, message, to: Optional[str] = None) -> None:
        self._broadcaster.emit(message.event, message.to_payload(), to=to)
