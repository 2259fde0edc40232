import threading
from typing import Callable


class TimerHandle:
    """Cancellable handle for a repeating task."""

    def __init__(self):
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()


class BackgroundScheduler:
    """Runs repeating callbacks as Socket.IO background tasks.

    ``socketio.sleep`` cooperates with whichever async mode Flask-SocketIO
    picked (threading, eventlet or gevent).
    """

    def __init__(self, socketio, logger=None):
        self.socketio = socketio
        self.logger = logger

    def every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()

        def _worker():
            while not handle.cancelled:
                self.socketio.sleep(interval)
                if handle.cancelled:
                    break
                try:
                    callback()
                except Exception:
                    if self.logger is not None:
                        self.logger.exception('[timer-error] tick callback failed')
                    handle.cancel()
                    raise

        self.socketio.start_background_task(_worker)
        return handle


class RoundTimer:
    """Countdown driver owned by a single Session.

    Each firing calls ``on_tick(timer)``; the receiver checks that the Session
    still holds this timer before mutating anything, so a tick racing a
    cancellation is dropped.
    """

    def __init__(self, scheduler, interval: float, on_tick: Callable[['RoundTimer'], None]):
        self.interval = interval
        self._on_tick = on_tick
        self._handle = scheduler.every(interval, self._fire)

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled

    def cancel(self) -> None:
        self._handle.cancel()

    def _fire(self) -> None:
        if not self.cancelled:
            self._on_tick(self)
