from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import logging
import random
import click
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _configure_logging(flask_app):
    level = getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    flask_app.logger.setLevel(level)
    logging.getLogger('cantstop').setLevel(level)
    log_file = flask_app.config.get('LOG_FILE')
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        flask_app.logger.addHandler(file_handler)
        logging.getLogger('cantstop').addHandler(file_handler)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    _configure_logging(flask_app)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Dice and shuffles draw from one generator per app so a seed replays a session
    flask_app.extensions['dice_rng'] = random.Random(flask_app.config.get('RANDOM_SEED'))

    from cantstop.main import main
    flask_app.register_blueprint(main)

    from cantstop.api.games import games
    # Mount game routes under /api to match frontend API client
    flask_app.register_blueprint(games, url_prefix='/api/games')

    # Register Socket.IO event handlers
    from cantstop.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from cantstop.models import PlayerIdentity

    @login_manager.user_loader
    def load_player(pid):
        return PlayerIdentity(pid) if pid else None

    @login_manager.unauthorized_handler
    def no_player_session():
        return jsonify({'error': 'No player session'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the game state tables."""
        import cantstop.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    flask_app.logger.info(f"[startup] cantstop app created min_players={flask_app.config.get('MIN_PLAYERS')}")
    return flask_app
