from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Container, Dict, Optional
import secrets

if TYPE_CHECKING:
    from taprace.services.sessions.scheduler import RoundTimer


ROOM_ID_BYTES = 4


class Phase(str, Enum):
    WAITING = 'waiting'
    PLAYING = 'playing'
    FINISHED = 'finished'


def generate_room_id(taken: Container[str] = ()) -> str:
    """Generate a short, unguessable room id (8 hex chars)."""
    while True:
        room_id = secrets.token_hex(ROOM_ID_BYTES)
        if room_id not in taken:
            return room_id


@dataclass
class Member:
    display_name: str
    ready: bool = False
    score: int = 0

    def to_dict(self, sid: str) -> dict:
        return {
            'id': sid,
            'name': self.display_name,
            'ready': self.ready,
            'taps': self.score,
        }


@dataclass
class Session:
    """One room: phase, roster, creator and the live round timer.

    ``members`` keeps join order; the roster is serialized in that order and
    the earliest-joined member succeeds a departing creator.
    """
    room_id: str
    round_duration: int
    phase: Phase = Phase.WAITING
    members: Dict[str, Member] = field(default_factory=dict)
    creator_id: Optional[str] = None
    time_remaining: int = field(init=False, default=0)
    timer: Optional['RoundTimer'] = None

    def __post_init__(self):
        self.time_remaining = self.round_duration

    def add_member(self, sid: str, display_name: str) -> Member:
        member = Member(display_name=display_name)
        self.members[sid] = member
        if self.creator_id is None:
            self.creator_id = sid
        return member

    def remove_member(self, sid: str) -> Optional[str]:
        """Drop ``sid``; returns the new creator id if the creator changed."""
        self.members.pop(sid, None)
        if not self.members:
            self.creator_id = None
            return None
        if self.creator_id == sid:
            self.creator_id = next(iter(self.members))
            return self.creator_id
        return None

    def all_ready(self) -> bool:
        return bool(self.members) and all(m.ready for m in self.members.values())

    def start_round(self, timer: Optional['RoundTimer']) -> None:
        self.phase = Phase.PLAYING
        self.time_remaining = self.round_duration
        for member in self.members.values():
            member.score = 0
        self.timer = timer

    def tick(self) -> bool:
        """Advance the countdown by one second. Returns True when the round ends."""
        self.time_remaining = max(0, self.time_remaining - 1)
        if self.time_remaining == 0:
            self.cancel_timer()
            self.phase = Phase.FINISHED
            return True
        return False

    def rearm(self) -> None:
        self.cancel_timer()
        self.phase = Phase.WAITING
        self.time_remaining = self.round_duration
        for member in self.members.values():
            member.ready = False
            member.score = 0

    def cancel_timer(self) -> bool:
        if self.timer is None:
            return False
        self.timer.cancel()
        self.timer = None
        return True

    def to_dict(self, for_sid: Optional[str] = None) -> dict:
        data = {
            'gameId': self.room_id,
            'state': self.phase.value,
            'players': [m.to_dict(sid) for sid, m in self.members.items()],
            'timeLeft': self.time_remaining,
        }
        if for_sid is not None:
            data['isCreator'] = for_sid == self.creator_id
        return data
