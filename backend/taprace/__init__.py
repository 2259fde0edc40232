from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from taprace.config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config, scheduler=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS') or '*'
    if allowed_origins == ['*']:
        allowed_origins = '*'
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Session state lives on the app so each app (and each test) gets its own rooms
    from taprace.services.sessions import BackgroundScheduler, Broadcaster, SessionCoordinator
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    if scheduler is None:
        scheduler = BackgroundScheduler(socketio, logger=flask_app.logger)
    flask_app.extensions['sessions'] = SessionCoordinator(
        broadcaster=Broadcaster(socketio.emit, namespace=namespace),
        scheduler=scheduler,
        round_duration=int(flask_app.config.get('ROUND_DURATION_SEC', 15)),
        tick_interval=float(flask_app.config.get('ROUND_TICK_SEC', 1.0)),
        logger=flask_app.logger,
    )

    from taprace.routes import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers on the configured namespace
    from taprace.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    return flask_app
