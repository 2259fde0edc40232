from typing import Callable, Iterable, Optional

from taprace.models import Session


class Broadcaster:
    """Pushes session state to room members.

    ``emit`` has the ``socketio.emit(event, data, to=..., namespace=...)``
    signature. Every message is addressed to a single sid so that
    ``isCreator`` can be computed per recipient. Sending to a sid that has
    already disconnected is a no-op on the Socket.IO side.
    """

    def __init__(self, emit: Callable, namespace: str = '/'):
        self._emit = emit
        self.namespace = namespace

    def _send(self, event: str, data: dict, sid: str) -> None:
        self._emit(event, data, to=sid, namespace=self.namespace)

    def game_state(self, session: Session, only: Optional[Iterable[str]] = None) -> None:
        targets = list(session.members) if only is None else list(only)
        for sid in targets:
            self._send('game_state', session.to_dict(for_sid=sid), sid)

    def tap_update(self, session: Session, player_id: str) -> None:
        data = {'playerId': player_id, 'taps': session.members[player_id].score}
        for sid in session.members:
            self._send('tap_update', data, sid)

    def error(self, sid: str, message: str) -> None:
        self._send('error', {'message': message}, sid)
