"""Wire messages exchanged with browser clients over Socket.IO.

Outbound (server -> client):
    - dungeon data: the active level, see ``DungeonSession.to_payload``
    - hiscore data: list of {username, timeTaken, id}
    - player data: list of {x, y, facing, id, name}

Inbound (client -> server):
    - move: bare string token, one of up/down/left/right
    - username update: bare string
    - connect / disconnect: Socket.IO lifecycle, carry only the connection id

Inbound payloads that do not have the expected shape parse to ``None``
and are dropped by the caller.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

from dungeon_game.services.roster import Direction

DUNGEON_DATA = 'dungeon data'
HISCORE_DATA = 'hiscore data'
PLAYER_DATA = 'player data'
MOVE = 'move'
USERNAME_UPDATE = 'username update'
CONNECT = 'connect'
DISCONNECT = 'disconnect'


@dataclass(frozen=True)
class DungeonData:
    event: ClassVar[str] = DUNGEON_DATA
    session: object

    def to_payload(self):
        return self.session.to_payload()


@dataclass(frozen=True)
class HiscoreData:
    event: ClassVar[str] = HISCORE_DATA
    records: Tuple = ()

    def to_payload(self):
        return [r.to_dict() for r in self.records]


@dataclass(frozen=True)
class PlayerData:
    event: ClassVar[str] = PLAYER_DATA
    players: Tuple = ()

    def to_payload(self):
        return [p.to_dict() for p in self.players]


@dataclass(frozen=True)
class Connect:
    event: ClassVar[str] = CONNECT
    sid: str


@dataclass(frozen=True)
class Disconnect:
    event: ClassVar[str] = DISCONNECT
    sid: str


@dataclass(frozen=True)
class Move:
    event: ClassVar[str] = MOVE
    sid: str
    direction: Direction


@dataclass(frozen=True)
class UsernameUpdate:
    event: ClassVar[str] = USERNAME_UPDATE
    sid: str
    name: str


def parse_move(sid: str, payload) -> Optional[Move]:
    direction = Direction.parse(payload)
    if direction is None:
        return None
    return Move(sid=sid, direction=direction)


def parse_username_update(sid: str, payload) -> Optional[UsernameUpdate]:
    if not isinstance(payload, str):
        return None
    return UsernameUpdate(sid=sid, name=payload)
