import os
import random
import sys
import pytest

# Ensure the project root (containing the `cantstop` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from cantstop import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MIN_PLAYERS = 2
    CORS_ORIGINS = ['http://localhost:5173']
    LOG_LEVEL = 'DEBUG'
    RANDOM_SEED = 1234


class ScriptedRng(random.Random):
    """Random source whose dice come from a fixed script."""

    def __init__(self, *rolls):
        super().__init__(0)
        self._values = [v for roll in rolls for v in roll]

    def randint(self, a, b):
        return self._values.pop(0)


@pytest.fixture()
def scripted_rng():
    return ScriptedRng


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import cantstop.models  # noqa: F401
        db.create_all()
    # Requests push their own app context; sharing one would share flask.g
    # and with it Flask-Login's cached user.
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def _player_client(flask_app):
    test_client = flask_app.test_client()
    pid = test_client.post('/session').get_json()['pid']
    return test_client, pid


@pytest.fixture()
def alice(flask_app):
    return _player_client(flask_app)


@pytest.fixture()
def bob(flask_app):
    return _player_client(flask_app)


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
