"""Turn and phase state machine.

A turn alternates between two phases. In ``rolling`` the active player
either rolls or holds; a roll with no usable pairing is a bust and passes
the turn, otherwise the game moves to ``pairing`` until the player picks
pairs, which advances neutral markers and returns to ``rolling``. Holding
turns the neutral markers into permanent pieces, locks any column whose top
was reached and either declares a winner or passes the turn.

Every function takes a state and returns a new one. Illegal calls return
the state unchanged, optionally with ``message`` set; nothing here raises.
"""

import logging
import random
from typing import Dict, List, Optional, Sequence

from .board import top_slot
from .lifecycle import generate_game_code
from .pairing import (
    can_start_marker,
    has_any_valid_move,
    is_placeable,
    next_free_slot,
    remaining_dice,
)
from .state import GameState, PHASE_PAIRING, PHASE_ROLLING, current_player_id

logger = logging.getLogger(__name__)

WINNING_LOCKS = 3
DICE_COUNT = 4

MSG_USE_BOTH_PAIRS = 'You must use both pairs since the remaining dice form a valid pair.'
MSG_CANNOT_PLACE = 'Invalid move: cannot place a neutral piece in that column.'
MSG_BEYOND_TOP = 'Invalid move: cannot advance piece beyond the top of the column.'


def _is_turn(state: GameState, player_id: str, phase: str) -> bool:
    return current_player_id(state) == player_id and state.phase == phase


def advance_turn(state: GameState) -> GameState:
    """Pass the turn to the next player in the order who is still in the game."""
    next_index = state.turn_index
    count = len(state.player_order)
    for step in range(1, count + 1):
        candidate = (state.turn_index + step) % count
        if state.player_order[candidate] in state.players:
            next_index = candidate
            break
    return state.evolve(
        turn_index=next_index,
        dice=None,
        neutral_pieces={},
        phase=PHASE_ROLLING,
        message=None,
    )


def roll_dice(state: GameState, player_id: str, rng: Optional[random.Random] = None) -> GameState:
    """Roll four dice for the active player.

    A bust clears the turn and passes it on, so callers can tell a bust
    happened from a changed ``turn_index``.
    """
    if not _is_turn(state, player_id, PHASE_ROLLING):
        return state
    rng = rng or random.Random()
    dice = [rng.randint(1, 6) for _ in range(DICE_COUNT)]
    if not has_any_valid_move(state, dice):
        logger.debug("bust for %s with %s", player_id, dice)
        return advance_turn(state)
    return state.evolve(dice=dice, phase=PHASE_PAIRING, message=None)


def _filled_pairs(pairs) -> List[List[int]]:
    filled = []
    for pair in list(pairs or [])[:2]:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            continue
        if pair[0] is None or pair[1] is None:
            continue
        filled.append([pair[0], pair[1]])
    return filled


def _project_pair(state: GameState, player_id: str, pair: Sequence[int]) -> Optional[GameState]:
    """Scratch state after applying ``pair``, or None if an existing marker would overflow.

    A new marker that cannot be placed leaves the projection untouched; the
    real placement step rejects it afterwards.
    """
    total = pair[0] + pair[1]
    neutral = dict(state.neutral_pieces)
    if total in neutral:
        if neutral[total] >= top_slot(total):
            return None
        neutral[total] += 1
    elif can_start_marker(state, player_id, total):
        neutral[total] = next_free_slot(state, player_id, total)
    return state.evolve(neutral_pieces=neutral)


def choose_pairs(state: GameState, player_id: str, pairs) -> GameState:
    """Apply the pair(s) the active player picked from the current roll.

    ``pairs`` holds up to two ``[a, b]`` dice values; ``None`` marks an
    unused slot.
    """
    if not _is_turn(state, player_id, PHASE_PAIRING) or not state.dice:
        return state

    chosen = _filled_pairs(pairs)
    if not chosen:
        return state

    used = [value for pair in chosen for value in pair]
    left = remaining_dice(state.dice, used)
    if left is None:
        logger.debug("rejected pairs %s for roll %s", chosen, state.dice)
        return state

    if len(chosen) == 1 and len(left) == 2:
        projected = _project_pair(state, player_id, chosen[0])
        if projected is None:
            return state.evolve(message=MSG_BEYOND_TOP)
        if is_placeable(projected, left):
            return state.evolve(message=MSG_USE_BOTH_PAIRS)

    neutral: Dict[int, int] = dict(state.neutral_pieces)
    for pair in chosen:
        total = pair[0] + pair[1]
        if total in neutral:
            if neutral[total] >= top_slot(total):
                return state.evolve(message=MSG_BEYOND_TOP)
            neutral[total] += 1
        elif can_start_marker(state.evolve(neutral_pieces=neutral), player_id, total):
            neutral[total] = next_free_slot(state, player_id, total)
        else:
            return state.evolve(message=MSG_CANNOT_PLACE)

    return state.evolve(
        neutral_pieces=neutral,
        phase=PHASE_ROLLING,
        dice=None,
        message=None,
    )


def hold(state: GameState, player_id: str, rng: Optional[random.Random] = None) -> GameState:
    """Commit the neutral markers as permanent pieces and end the turn."""
    if not _is_turn(state, player_id, PHASE_ROLLING) or not state.neutral_pieces:
        return state

    pieces = {col: list(entries) for col, entries in state.pieces.items()}
    locked = dict(state.locked_columns)
    for column, slot in state.neutral_pieces.items():
        entries = [p for p in pieces.get(column, []) if p['playerId'] != player_id]
        if slot == top_slot(column):
            locked[column] = player_id
            # The column is claimed; nobody else keeps a piece in it.
            entries = []
        entries.append({'playerId': player_id, 'slot': slot})
        pieces[column] = entries

    committed = state.evolve(pieces=pieces, locked_columns=locked, neutral_pieces={})
    locks = sum(1 for owner in locked.values() if owner == player_id)
    if locks >= WINNING_LOCKS:
        logger.debug("%s wins with %d locked columns", player_id, locks)
        return committed.evolve(
            winner=player_id,
            next_game=state.next_game or generate_game_code(rng),
            message=None,
        )
    return advance_turn(committed)
