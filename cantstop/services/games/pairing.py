"""Pairing evaluator.

Turns a roll of four dice into the three ways of splitting it into two
pairs, and answers whether a pair (or any pairing) can be used against a
given game state.

Two checks exist on purpose and they are not equivalent:

- ``can_use_sum`` is the quick check behind bust detection. Starting a new
  marker only requires a free neutral marker and an unlocked column; it does
  not look at the player's own permanent piece in that column.
- ``is_placeable`` is the full placement rule used once the player commits
  to pairs, and it does require a free slot above the player's own piece.
"""

from typing import List, Optional, Sequence, Tuple

from .board import top_slot
from .state import GameState, current_player_id, player_slots

MAX_NEUTRAL_PIECES = 3

Pair = Tuple[int, int]

_GROUPINGS = (
    ((0, 1), (2, 3)),
    ((0, 2), (1, 3)),
    ((0, 3), (1, 2)),
)


def pairings(dice: Sequence[int]) -> List[Tuple[Pair, Pair]]:
    """The three fixed groupings of four dice into two unordered pairs."""
    return [
        ((dice[a], dice[b]), (dice[c], dice[d]))
        for (a, b), (c, d) in _GROUPINGS
    ]


def pair_sums(dice: Sequence[int]) -> List[Tuple[int, int]]:
    return [(sum(first), sum(second)) for first, second in pairings(dice)]


def can_use_sum(state: GameState, total: int) -> bool:
    if total in state.neutral_pieces:
        return state.neutral_pieces[total] < top_slot(total)
    return len(state.neutral_pieces) < MAX_NEUTRAL_PIECES and total not in state.locked_columns


def has_any_valid_move(state: GameState, dice: Sequence[int]) -> bool:
    """False means the roll is a bust."""
    return any(
        can_use_sum(state, first) or can_use_sum(state, second)
        for first, second in pair_sums(dice)
    )


def next_free_slot(state: GameState, player_id: Optional[str], column: int) -> int:
    """Slot a new neutral marker starts on: just above the player's own piece."""
    slots = player_slots(state, player_id, column)
    return max(slots) + 1 if slots else 0


def can_start_marker(state: GameState, player_id: Optional[str], column: int) -> bool:
    return (
        len(state.neutral_pieces) < MAX_NEUTRAL_PIECES
        and column not in state.locked_columns
        and next_free_slot(state, player_id, column) <= top_slot(column)
    )


def is_placeable(state: GameState, pair: Sequence[int]) -> bool:
    """Whether the active player could place or advance a marker with ``pair``."""
    total = pair[0] + pair[1]
    if total in state.neutral_pieces:
        return state.neutral_pieces[total] < top_slot(total)
    return can_start_marker(state, current_player_id(state), total)


def remaining_dice(dice: Sequence[int], used: Sequence[int]) -> Optional[List[int]]:
    """Remove ``used`` values from the roll one at a time.

    Returns None when a value is not available, so a die can never be
    spent twice.
    """
    pool = list(dice)
    for value in used:
        if value not in pool:
            return None
        pool.remove(value)
    return pool
