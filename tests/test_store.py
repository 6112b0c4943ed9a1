import pytest

from cantstop.services.games import store
from cantstop.services.games.state import GameState


def test_state_survives_a_transaction(flask_app):
    with flask_app.app_context():
        with store.game_transaction('ABCDE') as game:
            game.save_state(GameState(message='hello'))
        assert store.read_state('ABCDE').message == 'hello'


def test_failed_transaction_rolls_back(flask_app):
    with flask_app.app_context():
        with pytest.raises(RuntimeError):
            with store.game_transaction('ABCDE') as game:
                game.save_state(GameState(message='lost'))
                raise RuntimeError('boom')
        assert store.read_state('ABCDE').message is None


def test_game_locks_are_released_after_use(flask_app):
    with flask_app.app_context():
        for code in ('AAAAA', 'BBBBB', 'CCCCC'):
            store.read_state(code)
        with store.game_transaction('DDDDD'):
            assert list(store._game_locks) == ['DDDDD']
        with pytest.raises(RuntimeError):
            with store.game_transaction('EEEEE'):
                raise RuntimeError('boom')
    assert store._game_locks == {}
