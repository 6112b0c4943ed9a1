import logging
import random
import re
import string
from typing import Optional

from .state import GameState, PHASE_ROLLING

logger = logging.getLogger(__name__)

GAME_CODE_LENGTH = 5
_GAME_CODE_RE = re.compile(r'^[A-Z]{%d}$' % GAME_CODE_LENGTH)


def generate_game_code(rng: Optional[random.Random] = None) -> str:
    """Generate a short game code of uppercase letters."""
    rng = rng or random.Random()
    return ''.join(rng.choice(string.ascii_uppercase) for _ in range(GAME_CODE_LENGTH))


def is_valid_game_code(code) -> bool:
    return isinstance(code, str) and bool(_GAME_CODE_RE.match(code))


def has_winner(state: GameState) -> bool:
    return state.winner is not None


def start_game(state: GameState, rng: Optional[random.Random] = None) -> GameState:
    """Leave the lobby: shuffle the roster into a turn order and reset the turn.

    No-op on a game that has already started.
    """
    if state.started:
        return state
    rng = rng or random.Random()
    order = list(state.players)
    rng.shuffle(order)
    logger.debug("starting game with order %s", order)
    return state.evolve(
        started=True,
        player_order=order,
        turn_index=0,
        phase=PHASE_ROLLING,
        dice=None,
        neutral_pieces={},
        winner=None,
    )
