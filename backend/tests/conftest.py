import os
import sys
import pytest

# Ensure the backend root (containing the `deckdash` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from deckdash import create_app, db, socketio
from deckdash.services.decks.source import StaticSource


HEADER = [
    'topic_id', 'topic_name', 'card_id', 'image_url', 'correct_answer',
    'wrong_answer_1', 'wrong_answer_2', 'wrong_answer_3', 'difficulty', 'created_at',
]

SHEET_ROWS = [
    HEADER,
    ['birds', 'Garden Birds', 'b1', 'https://upload.wikimedia.org/robin.jpg', 'Robin', '', '', '', 'easy', '2024-01-01'],
    ['birds', 'Garden Birds', 'b2', 'https://upload.wikimedia.org/wren.jpg', 'Wren'],
    ['birds', 'Garden Birds', 'b3', 'null', 'Magpie'],
    ['flags', 'World Flags', 'f1', 'https://upload.wikimedia.org/fr.png', 'France', 'Italy', '', '', 'hard'],
    ['birds', 'Garden Birds', 'b4', 'https://upload.wikimedia.org/blackbird.jpg', 'Blackbird'],
    ['birds', 'Garden Birds', 'b5', 'https://upload.wikimedia.org/starling.jpg', 'Starling'],
    ['birds', 'Garden Birds', 'b6', 'https://upload.wikimedia.org/jay.jpg', 'Jay'],
    ['flags', 'World Flags', 'f2', 'https://upload.wikimedia.org/de.png', 'Germany'],
    ['short', 'Too', 'few'],
    ['birds', 'Garden Birds', 'b7', '', 'Owl'],
]


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ROUND_SIZE = 30
    MAX_ROUND_SIZE = 100
    SHUFFLE_SEED = 1234


@pytest.fixture()
def sheet_rows():
    return [list(r) for r in SHEET_ROWS]


@pytest.fixture()
def source(sheet_rows):
    return StaticSource(sheet_rows)


@pytest.fixture()
def flask_app(source):
    application = create_app(TestConfig, source=source)
    with application.app_context():
        # Ensure models are imported so tables are created
        import deckdash.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
