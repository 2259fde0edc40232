from flask import current_app, request
from typing import Any, Dict


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _coordinator():
    return current_app.extensions['sessions']


def _payload(data) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def handle_create_game(data=None):
    name = _payload(data).get('name') or ''
    _coordinator().create_room(_get_sid(), name)


def handle_join_game(data=None):
    payload = _payload(data)
    room_id = payload.get('gameId') or ''
    name = payload.get('name') or ''
    _coordinator().join_room(_get_sid(), room_id, name)


def handle_set_ready(data=None):
    _coordinator().toggle_ready(_get_sid())


def handle_tap(data=None):
    _coordinator().tap(_get_sid())


def handle_go_again(data=None):
    _coordinator().restart(_get_sid())


def handle_leave_game(data=None):
    _coordinator().leave(_get_sid())


def handle_disconnect(reason=None):
    _coordinator().leave(_get_sid())


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    from taprace import socketio

    socketio.on_event('create_game', handle_create_game, namespace=namespace)
    socketio.on_event('join_game', handle_join_game, namespace=namespace)
    socketio.on_event('set_ready', handle_set_ready, namespace=namespace)
    socketio.on_event('tap', handle_tap, namespace=namespace)
    socketio.on_event('go_again', handle_go_again, namespace=namespace)
    socketio.on_event('leave_game', handle_leave_game, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
