import os
import sys
import pytest

# Ensure the backend root (containing the `taprace` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from taprace import create_app, socketio
from taprace.services.sessions import Broadcaster, SessionCoordinator, TimerHandle


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ROUND_DURATION_SEC = 15
    ROUND_TICK_SEC = 1.0
    SOCKETIO_NAMESPACE = '/'
    CORS_ALLOWED_ORIGINS = ['*']
    LOG_LEVEL = 'DEBUG'


class ManualScheduler:
    """Scheduler stand-in: ticks only fire when a test calls ``advance``."""

    def __init__(self):
        self.tasks = []

    def every(self, interval, callback):
        handle = TimerHandle()
        self.tasks.append((handle, callback))
        return handle

    def advance(self, ticks=1):
        for _ in range(ticks):
            for handle, callback in list(self.tasks):
                if not handle.cancelled:
                    callback()

    @property
    def live(self):
        return [handle for handle, _ in self.tasks if not handle.cancelled]


class RecordingEmitter:
    def __init__(self):
        self.sent = []

    def __call__(self, event, data, to=None, namespace=None):
        self.sent.append((event, data, to))

    def to(self, sid, event=None):
        return [data for ev, data, target in self.sent if target == sid and (event is None or ev == event)]

    def last_state(self, sid):
        states = self.to(sid, 'game_state')
        return states[-1] if states else None

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def emitter():
    return RecordingEmitter()


@pytest.fixture()
def coordinator(emitter, scheduler):
    return SessionCoordinator(
        broadcaster=Broadcaster(emitter),
        scheduler=scheduler,
        round_duration=15,
        tick_interval=1.0,
    )


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
