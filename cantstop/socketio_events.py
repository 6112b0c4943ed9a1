from flask_socketio import join_room, leave_room, emit
from flask import current_app
from cantstop import socketio
from cantstop.services.games.lifecycle import is_valid_game_code
from cantstop.services.games.state import GameState


def room_for(game_code: str) -> str:
    return f"game:{game_code}"


def broadcast_state(game_code: str, state: GameState) -> None:
    """Push a new state to every viewer subscribed to the game."""
    socketio.emit(
        'state_update',
        {'game_code': game_code, 'state': state.to_dict()},
        to=room_for(game_code),
        namespace='/ws',
    )


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_game(data):
    game_code = ((data or {}).get('game_code') or '').upper()
    if not is_valid_game_code(game_code):
        emit('error', {'message': 'A valid game_code is required'})
        return
    room = room_for(game_code)
    join_room(room)
    emit('joined', {'room': room})
    # New viewers get the current snapshot right away
    from cantstop.services.games.store import read_state
    state = read_state(game_code)
    emit('state_update', {'game_code': game_code, 'state': state.to_dict()})
    current_app.logger.info(f"[ws-join] game={game_code}")


def handle_leave_game(data):
    game_code = ((data or {}).get('game_code') or '').upper()
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    room = room_for(game_code)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    # Primary namespace
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_game', handle_join_game, namespace='/ws')
    socketio.on_event('leave_game', handle_leave_game, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        # Test-only mirror on default namespace
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_game', handle_join_game, namespace='/')
        socketio.on_event('leave_game', handle_leave_game, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
