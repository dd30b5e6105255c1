import random

from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from deckdash.config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def get_source():
    """Row source bound to the current app."""
    return current_app.extensions['deckdash']['source']


def get_rng() -> random.Random:
    return current_app.extensions['deckdash']['rng']


def _build_source(flask_app):
    from deckdash.services.decks.source import SheetSource, http_fetch, sheet_url

    timeout = int(flask_app.config.get('SHEET_FETCH_TIMEOUT_SEC', 10))
    return SheetSource(
        sheet_url(flask_app.config),
        max_age=int(flask_app.config.get('SHEET_CACHE_SECONDS', 24 * 60 * 60)),
        fetch=lambda url: http_fetch(url, timeout=timeout),
    )


def create_app(config_class=Config, source=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    seed = flask_app.config.get('SHUFFLE_SEED')
    flask_app.extensions['deckdash'] = {
        'source': source if source is not None else _build_source(flask_app),
        'rng': random.Random(seed) if seed is not None else random.Random(),
    }

    from deckdash.main import main
    flask_app.register_blueprint(main)

    from deckdash.api.decks import decks
    flask_app.register_blueprint(decks, url_prefix='/api/decks')

    from deckdash.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from deckdash.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the play session tables."""
        import deckdash.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('cache-clear')
    def cache_clear_command():
        """Drops the cached sheet rows so the next request refetches."""
        flask_app.extensions['deckdash']['source'].invalidate()
        print('Sheet cache cleared!')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(cache_clear_command)

    return flask_app
