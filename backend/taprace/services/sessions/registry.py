from typing import Dict, Optional, Tuple

from taprace.models import Phase, Session, generate_room_id


class SessionError(Exception):
    """Base class for user-facing session errors."""
    message = 'Session error'

    def __init__(self, room_id: Optional[str] = None):
        super().__init__(self.message)
        self.room_id = room_id


class RoomNotFound(SessionError):
    message = 'Game not found. The link may have expired.'


class RoomNotJoinable(SessionError):
    message = 'This game has already started.'


class SessionRegistry:
    """Owns room id -> Session and sid -> room id.

    Not thread-safe on its own; callers serialise access (see
    ``SessionCoordinator``).
    """

    def __init__(self, round_duration: int):
        self.round_duration = round_duration
        self._sessions: Dict[str, Session] = {}
        self._sid_to_room: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._sessions

    def get(self, room_id: str) -> Optional[Session]:
        return self._sessions.get(room_id)

    def room_of(self, sid: str) -> Optional[Session]:
        room_id = self._sid_to_room.get(sid)
        if room_id is None:
            return None
        return self._sessions.get(room_id)

    def create(self, sid: str, display_name: str) -> Session:
        room_id = generate_room_id(self._sessions)
        session = Session(room_id=room_id, round_duration=self.round_duration)
        session.add_member(sid, display_name)
        self._sessions[room_id] = session
        self._sid_to_room[sid] = room_id
        return session

    def check_joinable(self, room_id: str) -> Session:
        session = self._sessions.get(room_id)
        if session is None:
            raise RoomNotFound(room_id)
        if session.phase != Phase.WAITING:
            raise RoomNotJoinable(room_id)
        return session

    def join(self, sid: str, room_id: str, display_name: str) -> Session:
        session = self.check_joinable(room_id)
        session.add_member(sid, display_name)
        self._sid_to_room[sid] = room_id
        return session

    def remove(self, sid: str) -> Tuple[Optional[Session], Optional[str], bool]:
        """Remove ``sid`` from its room.

        Returns ``(session, new_creator_id, destroyed)``. ``session`` is None
        when the sid was not in a room. An emptied Session is dropped and its
        timer cancelled before this returns.
        """
        room_id = self._sid_to_room.pop(sid, None)
        if room_id is None:
            return None, None, False
        session = self._sessions.get(room_id)
        if session is None:
            return None, None, False
        new_creator = session.remove_member(sid)
        if not session.members:
            session.cancel_timer()
            del self._sessions[room_id]
            return session, None, True
        return session, new_creator, False
