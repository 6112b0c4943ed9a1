"""Player roster: joining, leaving and editing players.

Removing a player keeps the turn pointer on a sensible player, strips the
player's pieces from the board and, if it was their turn, throws away the
turn in progress.
"""

import logging
from typing import List, Optional

from .state import GameState, PHASE_ROLLING, current_player_id

logger = logging.getLogger(__name__)

PLAYER_COLORS = (
    '#2563eb',  # blue
    '#dc2626',  # red
    '#16a34a',  # green
    '#fbbf24',  # yellow
    '#9333ea',  # purple
)

MSG_COLOR_TAKEN = 'That color is already taken by another player.'


def color_taken(state: GameState, color: str, player_id: Optional[str] = None) -> bool:
    return any(
        pid != player_id and info.get('color') == color
        for pid, info in state.players.items()
    )


def available_colors(state: GameState, player_id: Optional[str] = None) -> List[str]:
    return [c for c in PLAYER_COLORS if not color_taken(state, c, player_id)]


def add_player(state: GameState, player_id: str, color: str, name: str) -> GameState:
    if player_id in state.players:
        return state
    if color_taken(state, color, player_id):
        return state.evolve(message=MSG_COLOR_TAKEN)
    players = dict(state.players)
    players[player_id] = {'color': color, 'name': name}
    order = list(state.player_order)
    if player_id not in order:
        order.append(player_id)
    return state.evolve(players=players, player_order=order, message=None)


def update_player_info(state: GameState, player_id: str, color: str, name: str) -> GameState:
    if player_id not in state.players:
        return state
    if color_taken(state, color, player_id):
        return state.evolve(message=MSG_COLOR_TAKEN)
    players = dict(state.players)
    players[player_id] = {'color': color, 'name': name}
    return state.evolve(players=players, message=None)


def remove_player(state: GameState, player_id: str) -> GameState:
    if player_id not in state.players and player_id not in state.player_order:
        return state

    players = {pid: info for pid, info in state.players.items() if pid != player_id}
    order = [pid for pid in state.player_order if pid != player_id]

    if not players:
        logger.debug("last player %s left, resetting game", player_id)
        return GameState(chats=list(state.chats))

    turn_index = state.turn_index
    if player_id in state.player_order and state.player_order.index(player_id) <= state.turn_index:
        turn_index = max(0, state.turn_index - 1)
        if turn_index >= len(order):
            turn_index = 0

    pieces = {}
    for column, entries in state.pieces.items():
        kept = [p for p in entries if p['playerId'] != player_id]
        if kept:
            pieces[column] = kept

    changes = dict(
        players=players,
        player_order=order,
        turn_index=turn_index,
        pieces=pieces,
        message=None,
    )
    if current_player_id(state) == player_id:
        changes.update(neutral_pieces={}, dice=None, phase=PHASE_ROLLING)
    return state.evolve(**changes)
