"""Player intents and their dispatch to the engine.

A request body ``{"intent": ..., "parameters": {...}}`` is parsed into one
of the intent dataclasses below. Malformed or unknown bodies raise
``IntentError`` here, at the boundary; once parsed, every intent maps to
exactly one engine operation, which never raises.
"""

import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from .chat import add_chat
from .engine import choose_pairs, hold, roll_dice
from .lifecycle import start_game
from .roster import add_player, remove_player, update_player_info
from .state import GameState


class IntentError(ValueError):
    """The request body does not describe a known, well-formed intent."""


@dataclass(frozen=True)
class RollDice:
    pass


@dataclass(frozen=True)
class ChoosePairs:
    pairs: Tuple[Optional[Tuple[Optional[int], Optional[int]]], ...]


@dataclass(frozen=True)
class Hold:
    pass


@dataclass(frozen=True)
class StartGame:
    pass


@dataclass(frozen=True)
class UpdatePlayerInfo:
    color: str
    name: str


@dataclass(frozen=True)
class AddPlayer:
    player_id: str
    color: str
    name: str


@dataclass(frozen=True)
class RemovePlayer:
    player_id: str


@dataclass(frozen=True)
class QuitGame:
    pass


@dataclass(frozen=True)
class Chat:
    message: str
    timestamp: Optional[int] = None


class IntentResult(NamedTuple):
    state: GameState
    bust: bool = False


def _require_str(params: Dict[str, Any], key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str):
        raise IntentError(f"Parameter '{key}' must be a string")
    return value


def _die(value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise IntentError('Dice values must be integers or null')
    return value


def _parse_pairs(params: Dict[str, Any]) -> ChoosePairs:
    raw = params.get('pairs')
    if not isinstance(raw, list) or len(raw) > 2:
        raise IntentError("Parameter 'pairs' must be a list of up to two pairs")
    pairs: List[Optional[Tuple[Optional[int], Optional[int]]]] = []
    for pair in raw:
        if pair is None:
            pairs.append(None)
            continue
        if not isinstance(pair, list) or len(pair) != 2:
            raise IntentError('Each pair must be a list of two dice values')
        pairs.append((_die(pair[0]), _die(pair[1])))
    return ChoosePairs(pairs=tuple(pairs))


def _parse_chat(params: Dict[str, Any]) -> Chat:
    timestamp = params.get('timestamp')
    if timestamp is not None and (isinstance(timestamp, bool) or not isinstance(timestamp, (int, float))):
        raise IntentError("Parameter 'timestamp' must be a number")
    return Chat(
        message=_require_str(params, 'message'),
        timestamp=int(timestamp) if timestamp is not None else None,
    )


_PARSERS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    'rollDice': lambda params: RollDice(),
    'choosePairs': _parse_pairs,
    'hold': lambda params: Hold(),
    'startGame': lambda params: StartGame(),
    'updatePlayerInfo': lambda params: UpdatePlayerInfo(
        color=_require_str(params, 'color'),
        name=_require_str(params, 'name'),
    ),
    'addPlayer': lambda params: AddPlayer(
        player_id=_require_str(params, 'playerId'),
        color=_require_str(params, 'color'),
        name=_require_str(params, 'name'),
    ),
    'removePlayer': lambda params: RemovePlayer(player_id=_require_str(params, 'playerId')),
    'quitGame': lambda params: QuitGame(),
    'chat': _parse_chat,
}


def parse_intent(payload) -> Any:
    if not isinstance(payload, dict):
        raise IntentError('Request body must be a JSON object')
    name = payload.get('intent')
    parser = _PARSERS.get(name) if isinstance(name, str) else None
    if parser is None:
        raise IntentError('Unknown intent')
    params = payload.get('parameters') or {}
    if not isinstance(params, dict):
        raise IntentError("'parameters' must be a JSON object")
    return parser(params)


def apply_intent(
    state: GameState,
    player_id: str,
    intent,
    rng: Optional[random.Random] = None,
    now_ms: int = 0,
) -> IntentResult:
    """Run the one engine operation an intent stands for.

    ``bust`` is derived here rather than by the engine: a roll that moved
    the turn pointer was a bust.
    """
    if isinstance(intent, RollDice):
        new_state = roll_dice(state, player_id, rng)
        return IntentResult(new_state, new_state.turn_index != state.turn_index)
    if isinstance(intent, ChoosePairs):
        return IntentResult(choose_pairs(state, player_id, intent.pairs))
    if isinstance(intent, Hold):
        return IntentResult(hold(state, player_id, rng))
    if isinstance(intent, StartGame):
        return IntentResult(start_game(state, rng))
    if isinstance(intent, UpdatePlayerInfo):
        return IntentResult(update_player_info(state, player_id, intent.color, intent.name))
    if isinstance(intent, AddPlayer):
        return IntentResult(add_player(state, intent.player_id, intent.color, intent.name))
    if isinstance(intent, RemovePlayer):
        return IntentResult(remove_player(state, intent.player_id))
    if isinstance(intent, QuitGame):
        return IntentResult(remove_player(state, player_id))
    if isinstance(intent, Chat):
        return IntentResult(add_chat(state, player_id, intent.message, intent.timestamp, now_ms))
    raise IntentError(f"Unhandled intent {intent!r}")
