from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app; handlers and routes reach it through extensions
    from rekognize.services.rooms import RoomRegistry
    registry = RoomRegistry(total_rounds=int(flask_app.config.get('TOTAL_ROUNDS', 10)))
    flask_app.extensions['rekognize.registry'] = registry

    from rekognize.routes import main
    flask_app.register_blueprint(main)

    from rekognize.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    from rekognize.socketio_events import register_socketio_handlers
    register_socketio_handlers(registry, testing=flask_app.config.get('TESTING', False))

    return flask_app
