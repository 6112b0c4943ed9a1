from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

PHASE_ROLLING = 'rolling'
PHASE_PAIRING = 'pairing'
PHASES = (PHASE_ROLLING, PHASE_PAIRING)


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of one game.

    Transitions never touch an existing snapshot: they copy the maps or
    lists they change and build a new value with ``dataclasses.replace``.
    Column keys are ints here and strings on the wire.
    """
    pieces: Dict[int, List[Dict[str, Any]]] = field(default_factory=dict)
    players: Dict[str, Dict[str, str]] = field(default_factory=dict)
    locked_columns: Dict[int, str] = field(default_factory=dict)
    player_order: List[str] = field(default_factory=list)
    turn_index: int = 0
    started: bool = False
    phase: str = PHASE_ROLLING
    dice: Optional[List[int]] = None
    neutral_pieces: Dict[int, int] = field(default_factory=dict)
    winner: Optional[str] = None
    message: Optional[str] = None
    next_game: Optional[str] = None
    chats: List[Dict[str, Any]] = field(default_factory=list)

    def evolve(self, **changes) -> 'GameState':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pieces': {
                str(col): [dict(p) for p in entries] for col, entries in self.pieces.items()
            },
            'players': {pid: dict(info) for pid, info in self.players.items()},
            'lockedColumns': {str(col): pid for col, pid in self.locked_columns.items()},
            'playerOrder': list(self.player_order),
            'turnIndex': self.turn_index,
            'started': self.started,
            'phase': self.phase,
            'dice': list(self.dice) if self.dice is not None else None,
            'neutralPieces': {str(col): slot for col, slot in self.neutral_pieces.items()},
            'winner': self.winner,
            'message': self.message,
            'nextGame': self.next_game,
            'chats': [dict(c) for c in self.chats],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'GameState':
        data = data or {}
        phase = data.get('phase') or PHASE_ROLLING
        if phase not in PHASES:
            phase = PHASE_ROLLING
        dice = data.get('dice')
        return cls(
            pieces={
                int(col): [
                    {'playerId': p['playerId'], 'slot': int(p['slot'])} for p in entries
                ]
                for col, entries in (data.get('pieces') or {}).items()
            },
            players={
                pid: {'color': info.get('color', ''), 'name': info.get('name', '')}
                for pid, info in (data.get('players') or {}).items()
            },
            locked_columns={
                int(col): pid for col, pid in (data.get('lockedColumns') or {}).items()
            },
            player_order=list(data.get('playerOrder') or []),
            turn_index=int(data.get('turnIndex') or 0),
            started=bool(data.get('started', False)),
            phase=phase,
            dice=[int(d) for d in dice] if dice is not None else None,
            neutral_pieces={
                int(col): int(slot) for col, slot in (data.get('neutralPieces') or {}).items()
            },
            winner=data.get('winner'),
            message=data.get('message'),
            next_game=data.get('nextGame'),
            chats=list(data.get('chats') or []),
        )


def current_player_id(state: GameState) -> Optional[str]:
    """Id of the player whose turn it is, None if the index is out of range."""
    if 0 <= state.turn_index < len(state.player_order):
        return state.player_order[state.turn_index]
    return None


def player_slots(state: GameState, player_id: str, column: int) -> List[int]:
    return [p['slot'] for p in state.pieces.get(column, []) if p['playerId'] == player_id]
