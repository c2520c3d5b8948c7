from flask import current_app, request

from dungeon_game import socketio
from dungeon_game.protocol import (
    CONNECT,
    DISCONNECT,
    MOVE,
    USERNAME_UPDATE,
    Connect,
    Disconnect,
    parse_move,
    parse_username_update,
)


class SocketIOBroadcaster:
    """Fire-and-forget fan-out over Socket.IO.

    ``to=None`` sends to every connection in the namespace, otherwise only to
    the given connection id. Emit failures are logged and dropped.
    """

    def __init__(self, sio, namespace: str = '/', logger=None):
        self._sio = sio
        self._namespace = namespace
        self._logger = logger

    def emit(self, event: str, payload, to=None) -> None:
        try:
            self._sio.emit(event, payload, to=to, namespace=self._namespace)
        except Exception as exc:
            if self._logger is not None:
                self._logger.warning(f"[emit-dropped] event={event!r} to={to} error={exc}")


def _game_server():
    return current_app.extensions['dungeon_game']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    _game_server().handle(Connect(_get_sid()))


def handle_disconnect(reason=None):
    _game_server().handle(Disconnect(_get_sid()))


def handle_move(data):
    message = parse_move(_get_sid(), data)
    if message is None:
        current_app.logger.debug(f"[ignored] malformed move payload {data!r}")
        return
    _game_server().handle(message)


def handle_username_update(data):
    message = parse_username_update(_get_sid(), data)
    if message is None:
        current_app.logger.debug(f"[ignored] malformed username update {data!r}")
        return
    _game_server().handle(message)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event(CONNECT, handle_connect, namespace=namespace)
    socketio.on_event(DISCONNECT, handle_disconnect, namespace=namespace)
    socketio.on_event(MOVE, handle_move, namespace=namespace)
    socketio.on_event(USERNAME_UPDATE, handle_username_update, namespace=namespace)
