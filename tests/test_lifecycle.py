import json
import random

from cantstop.services.games.chat import MAX_CHATS, MAX_CHAT_LENGTH, add_chat
from cantstop.services.games.lifecycle import (
    generate_game_code,
    has_winner,
    is_valid_game_code,
    start_game,
)
from cantstop.services.games.roster import add_player
from cantstop.services.games.state import GameState, current_player_id


def lobby():
    state = add_player(GameState(), 'p1', '#2563eb', 'Alice')
    return add_player(state, 'p2', '#dc2626', 'Bob')


def test_start_game_shuffles_roster():
    started = start_game(lobby(), random.Random(3))
    assert started.started is True
    assert sorted(started.player_order) == ['p1', 'p2']
    assert started.turn_index == 0
    assert started.phase == 'rolling'
    assert started.dice is None
    assert started.neutral_pieces == {}
    assert current_player_id(started) in ('p1', 'p2')


def test_start_game_twice_is_a_noop():
    started = start_game(lobby(), random.Random(3))
    assert start_game(started, random.Random(4)) is started


def test_game_codes():
    code = generate_game_code(random.Random(11))
    assert is_valid_game_code(code)
    assert not is_valid_game_code('abcde')
    assert not is_valid_game_code('ABCD')
    assert not is_valid_game_code('ABCD1')
    assert not is_valid_game_code(None)


def test_has_winner():
    assert not has_winner(GameState())
    assert has_winner(GameState(winner='p1'))


def test_chat_appends_entry_with_author_details():
    state = add_chat(lobby(), 'p1', '  good luck  ', now_ms=1700)
    assert state.chats == [{
        'id': 'p1-1700',
        'playerId': 'p1',
        'name': 'Alice',
        'color': '#2563eb',
        'message': 'good luck',
        'timestamp': 1700,
    }]


def test_chat_ignores_strangers_and_blank_messages():
    state = lobby()
    assert add_chat(state, 'ghost', 'hello', now_ms=1) is state
    assert add_chat(state, 'p1', '   ', now_ms=1) is state
    assert add_chat(state, 'p1', None, now_ms=1) is state


def test_chat_log_is_capped():
    state = lobby()
    for i in range(MAX_CHATS + 5):
        state = add_chat(state, 'p2', f"msg {i}", now_ms=i)
    assert len(state.chats) == MAX_CHATS
    assert state.chats[0]['message'] == 'msg 5'
    long = add_chat(state, 'p1', 'x' * 500, now_ms=999)
    assert len(long.chats[-1]['message']) == MAX_CHAT_LENGTH


def test_state_wire_format_survives_json():
    state = GameState(
        pieces={7: [{'playerId': 'p1', 'slot': 3}]},
        players={'p1': {'color': '#2563eb', 'name': 'Alice'}},
        locked_columns={2: 'p1'},
        player_order=['p1'],
        started=True,
        phase='pairing',
        dice=[1, 2, 3, 4],
        neutral_pieces={7: 4},
        next_game='QWERT',
    )
    wire = json.loads(json.dumps(state.to_dict()))
    assert wire['lockedColumns'] == {'2': 'p1'}
    assert wire['neutralPieces'] == {'7': 4}
    assert GameState.from_dict(wire) == state


def test_state_from_empty_payload():
    assert GameState.from_dict({}) == GameState()
    assert GameState.from_dict(None) == GameState()
