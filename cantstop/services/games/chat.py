from typing import Optional

from .state import GameState

MAX_CHATS = 100
MAX_CHAT_LENGTH = 200


def add_chat(
    state: GameState,
    player_id: str,
    message,
    timestamp: Optional[int] = None,
    now_ms: int = 0,
) -> GameState:
    """Append a chat line from a seated player, keeping the latest 100 lines."""
    player = state.players.get(player_id)
    if not player or not isinstance(message, str) or not message.strip():
        return state
    entry = {
        'id': f"{player_id}-{now_ms}",
        'playerId': player_id,
        'name': player['name'],
        'color': player['color'],
        'message': message.strip()[:MAX_CHAT_LENGTH],
        'timestamp': timestamp or now_ms,
    }
    return state.evolve(chats=(list(state.chats) + [entry])[-MAX_CHATS:])
