"""Room session services: registry, round timer and broadcasts.

This package holds the in-memory session logic used by the socket
handlers, keeping transport concerns separated from the room state machine.
"""

from .broadcast import Broadcaster
from .coordinator import SessionCoordinator
from .registry import RoomNotFound, RoomNotJoinable, SessionError, SessionRegistry
from .scheduler import BackgroundScheduler, RoundTimer, TimerHandle
