import random

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, registry=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    if allowed_origins == ['*']:
        allowed_origins = '*'
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from showgame.main import main
    flask_app.register_blueprint(main)

    # One registry per app; tests pass their own
    from showgame.registry import RoomRegistry
    from showgame.socketio_events import SessionRouter, register_socketio_handlers
    if registry is None:
        seed = flask_app.config.get('SHUFFLE_SEED')
        registry = RoomRegistry(rng=random.Random(seed) if seed is not None else None)
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    flask_app.extensions['showgame'] = SessionRouter(registry, namespace=namespace, logger=flask_app.logger)
    register_socketio_handlers(namespace)

    return flask_app
