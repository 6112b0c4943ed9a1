"""Persistence of game states, one JSON row per game code.

The engine only turns one state into the next; this module makes the
load-transition-save cycle atomic per game. Writers for the same code are
serialized by a process-wide lock and by a row lock on databases that
support ``SELECT ... FOR UPDATE``.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List

from cantstop import db
from cantstop.models import Game
from .state import GameState

# code -> [lock, number of callers holding or waiting on it]
_game_locks: Dict[str, List] = {}
_game_locks_guard = threading.Lock()


@contextmanager
def _lock_for(game_code: str) -> Iterator[None]:
    """Serialize work on one game code. The entry is dropped once idle."""
    with _game_locks_guard:
        entry = _game_locks.setdefault(game_code, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _game_locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                del _game_locks[game_code]


def _get_or_create(game_code: str, for_update: bool = False) -> Game:
    query = Game.query.filter_by(game_code=game_code)
    if for_update:
        query = query.with_for_update()
    game = query.first()
    if game is None:
        game = Game(game_code=game_code)
        game.save_state(GameState())
        db.session.add(game)
        db.session.flush()
    return game


def read_state(game_code: str) -> GameState:
    """Current state of a game, creating an empty one on first reference."""
    with _lock_for(game_code):
        try:
            game = _get_or_create(game_code)
            state = game.load_state()
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
    return state


@contextmanager
def game_transaction(game_code: str) -> Iterator[Game]:
    """Hold the game's lock while the caller reads and replaces its state."""
    with _lock_for(game_code):
        try:
            game = _get_or_create(game_code, for_update=True)
            yield game
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise


def reserve_game(game_code: str) -> Game:
    game = Game(game_code=game_code)
    game.save_state(GameState())
    db.session.add(game)
    db.session.commit()
    return game
