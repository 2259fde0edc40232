import logging
import threading
from typing import Optional

from taprace.models import Phase, Session
from .broadcast import Broadcaster
from .registry import SessionError, SessionRegistry
from .scheduler import RoundTimer


class SessionCoordinator:
    """Applies client events and timer ticks to the session registry.

    Every public method and every tick runs under one re-entrant lock, so
    mutations never interleave and members see broadcasts in the order the
    events were processed. Invalid requests (no room, wrong phase, not the
    creator) are ignored without a reply.
    """

    def __init__(
        self,
        broadcaster: Broadcaster,
        scheduler,
        round_duration: int = 15,
        tick_interval: float = 1.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = SessionRegistry(round_duration)
        self.broadcaster = broadcaster
        self.scheduler = scheduler
        self.tick_interval = tick_interval
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()

    # ---- inbound events ----

    def create_room(self, sid: str, display_name: str) -> Session:
        with self._lock:
            self._leave(sid)
            session = self.registry.create(sid, display_name)
            self.logger.info(f"[room-create] room={session.room_id} creator={sid}")
            self.broadcaster.game_state(session, only=[sid])
            return session

    def join_room(self, sid: str, room_id: str, display_name: str) -> Optional[Session]:
        with self._lock:
            try:
                target = self.registry.check_joinable(room_id)
            except SessionError as exc:
                self.logger.info(f"[join-reject] room={room_id} sid={sid} reason={type(exc).__name__}")
                self.broadcaster.error(sid, exc.message)
                return None
            if sid in target.members:
                # Already here: keep the slot, just pick up the new name
                target.members[sid].display_name = display_name
                self.broadcaster.game_state(target)
                return target
            self._leave(sid)
            session = self.registry.join(sid, room_id, display_name)
            self.logger.info(f"[room-join] room={room_id} sid={sid} players={len(session.members)}")
            self.broadcaster.game_state(session)
            return session

    def toggle_ready(self, sid: str) -> None:
        with self._lock:
            session = self.registry.room_of(sid)
            if session is None or session.phase != Phase.WAITING:
                return
            member = session.members[sid]
            member.ready = not member.ready
            if session.all_ready():
                self._start_round(session)
            self.broadcaster.game_state(session)

    def tap(self, sid: str) -> None:
        with self._lock:
            session = self.registry.room_of(sid)
            if session is None or session.phase != Phase.PLAYING:
                return
            session.members[sid].score += 1
            self.logger.debug(f"[tap] room={session.room_id} sid={sid} taps={session.members[sid].score}")
            self.broadcaster.tap_update(session, sid)

    def restart(self, sid: str) -> None:
        with self._lock:
            session = self.registry.room_of(sid)
            if session is None or session.creator_id != sid:
                return
            if session.cancel_timer():
                self.logger.info(f"[timer-cancel] room={session.room_id} reason=restart")
            session.rearm()
            self.logger.info(f"[round-restart] room={session.room_id}")
            self.broadcaster.game_state(session)

    def leave(self, sid: str) -> None:
        with self._lock:
            self._leave(sid)

    # ---- queries ----

    def snapshot(self, room_id: str) -> Optional[dict]:
        with self._lock:
            session = self.registry.get(room_id)
            return session.to_dict() if session is not None else None

    def room_count(self) -> int:
        with self._lock:
            return len(self.registry)

    # ---- internals ----

    def _leave(self, sid: str) -> None:
        session, new_creator, destroyed = self.registry.remove(sid)
        if session is None:
            return
        self.logger.info(f"[room-leave] room={session.room_id} sid={sid}")
        if destroyed:
            self.logger.info(f"[room-destroy] room={session.room_id}")
            return
        if new_creator is not None:
            self.logger.info(f"[creator-reassign] room={session.room_id} creator={new_creator}")
        self.broadcaster.game_state(session)

    def _start_round(self, session: Session) -> None:
        timer = RoundTimer(self.scheduler, self.tick_interval, lambda t: self._on_tick(session.room_id, t))
        session.start_round(timer)
        self.logger.info(
            f"[round-start] room={session.room_id} players={len(session.members)} duration={session.time_remaining}s"
        )
        self.logger.info(f"[timer-set] room={session.room_id} interval={self.tick_interval}s")

    def _on_tick(self, room_id: str, timer: RoundTimer) -> None:
        with self._lock:
            session = self.registry.get(room_id)
            if session is None or session.timer is not timer:
                self.logger.info(f"[timer-stale] room={room_id}")
                timer.cancel()
                return
            finished = session.tick()
            self.logger.debug(f"[tick] room={room_id} remaining={session.time_remaining}")
            if finished:
                self.logger.info(f"[round-finish] room={room_id}")
            self.broadcaster.game_state(session)
