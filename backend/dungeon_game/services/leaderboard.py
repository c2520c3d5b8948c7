import logging
import threading
from typing import List, NamedTuple, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from dungeon_game import db
from dungeon_game.models import HiScore


class StoreError(Exception):
    """A read or write against the hiscore store failed."""


class ScoreRecord(NamedTuple):
    username: str
    time_taken: str
    entry_id: int

    def to_dict(self):
        return {'username': self.username, 'timeTaken': self.time_taken, 'id': self.entry_id}


def format_elapsed(elapsed_ms: int) -> str:
    """Render milliseconds as ``minutes:seconds:millis`` without padding."""
    elapsed_ms = int(elapsed_ms)
    return f"{elapsed_ms // 60000}:{(elapsed_ms // 1000) % 60}:{elapsed_ms % 1000}"


class HiScoreStore:
    """SQLAlchemy-backed ``hiscores`` table. Needs an application context."""

    def insert(self, record: ScoreRecord) -> None:
        row = HiScore(
            entry_id=record.entry_id,
            username=record.username[:HiScore.USERNAME_MAX_LEN],
            time_taken=record.time_taken,
        )
        try:
            db.session.add(row)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StoreError(f"insert failed: {exc}") from exc

    def select_all(self) -> List[ScoreRecord]:
        try:
            rows = HiScore.query.order_by(HiScore.entry_id).all()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StoreError(f"select failed: {exc}") from exc
        return [ScoreRecord(r.username, r.time_taken, r.entry_id) for r in rows]


class LeaderboardCache:
    """In-memory copy of the hiscore history.

    Reads are served from memory. Writes go to the store first and then
    reload the whole history. A failed read leaves the cache as it was,
    stale but intact, and marks it for a reload before the next write so
    new entry ids are never computed from an outdated history.
    """

    def __init__(self, store, logger=None):
        self._store = store
        self._logger = logger or logging.getLogger(__name__)
        self._records: Tuple[ScoreRecord, ...] = ()
        # True until the store has been read successfully
        self._stale = True
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._records)

    @property
    def stale(self) -> bool:
        return self._stale

    def load(self) -> Tuple[ScoreRecord, ...]:
        with self._lock:
            try:
                records = self._store.select_all()
            except StoreError as exc:
                self._stale = True
                self._logger.error(f"[hiscore-error] {exc}; keeping {len(self._records)} cached records")
                return self._records
            self._records = tuple(records)
            self._stale = False
            return self._records

    def record(self, username: str, time_taken: str) -> Optional[ScoreRecord]:
        with self._lock:
            if self._stale:
                self.load()
            entry = self._insert(username, time_taken)
            if entry is None and self._refresh():
                # The cache was behind the store; retry once with a fresh id
                entry = self._insert(username, time_taken)
            if entry is None:
                return None
            self._logger.info(f"[hiscore] id={entry.entry_id} name={username!r} time={time_taken}")
            if not self._refresh():
                # The row is committed even though it could not be read back
                self._records = self._records + (entry,)
            return entry

    def snapshot(self) -> Tuple[ScoreRecord, ...]:
        return self._records

    def _insert(self, username: str, time_taken: str) -> Optional[ScoreRecord]:
        entry = ScoreRecord(username, time_taken, len(self._records))
        try:
            self._store.insert(entry)
        except StoreError as exc:
            self._stale = True
            self._logger.error(f"[hiscore-error] {exc}")
            return None
        return entry

    def _refresh(self) -> bool:
        self.load()
        return not self._stale
