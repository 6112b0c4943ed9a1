from cantstop.services.games.roster import (
    MSG_COLOR_TAKEN,
    PLAYER_COLORS,
    add_player,
    available_colors,
    remove_player,
    update_player_info,
)
from cantstop.services.games.state import GameState


def seated(*pids):
    state = GameState()
    for pid, color in zip(pids, PLAYER_COLORS):
        state = add_player(state, pid, color, pid.upper())
    return state


def test_add_player_appends_to_order():
    state = add_player(GameState(), 'p1', '#2563eb', 'Alice')
    state = add_player(state, 'p2', '#dc2626', 'Bob')
    assert state.players == {
        'p1': {'color': '#2563eb', 'name': 'Alice'},
        'p2': {'color': '#dc2626', 'name': 'Bob'},
    }
    assert state.player_order == ['p1', 'p2']


def test_add_player_is_idempotent():
    once = add_player(GameState(), 'p1', '#2563eb', 'Alice')
    twice = add_player(once, 'p1', '#2563eb', 'Alice')
    assert twice == once


def test_add_player_rejects_taken_color():
    state = seated('p1')
    rejected = add_player(state, 'p2', PLAYER_COLORS[0], 'Copycat')
    assert rejected.message == MSG_COLOR_TAKEN
    assert 'p2' not in rejected.players


def test_update_player_info():
    state = seated('p1', 'p2')
    updated = update_player_info(state, 'p1', '#16a34a', 'Alicia')
    assert updated.players['p1'] == {'color': '#16a34a', 'name': 'Alicia'}
    # Keeping your own color is fine
    same = update_player_info(state, 'p1', PLAYER_COLORS[0], 'Al')
    assert same.message is None
    assert same.players['p1']['name'] == 'Al'


def test_update_player_info_rejects_color_of_other_player():
    state = seated('p1', 'p2')
    rejected = update_player_info(state, 'p1', PLAYER_COLORS[1], 'Alice')
    assert rejected.message == MSG_COLOR_TAKEN
    assert rejected.players == state.players


def test_update_unknown_player_is_ignored():
    state = seated('p1')
    assert update_player_info(state, 'ghost', '#16a34a', 'Boo') is state


def test_available_colors_excludes_other_players():
    state = seated('p1', 'p2')
    assert available_colors(state) == list(PLAYER_COLORS[2:])
    assert available_colors(state, 'p1') == [PLAYER_COLORS[0]] + list(PLAYER_COLORS[2:])


def test_removing_last_player_resets_game():
    state = seated('p1').evolve(
        started=True,
        phase='pairing',
        dice=[1, 2, 3, 4],
        neutral_pieces={3: 0},
        winner='p1',
        locked_columns={2: 'p1'},
        chats=[{'id': 'p1-1', 'message': 'hi'}],
    )
    reset = remove_player(state, 'p1')
    assert reset.players == {}
    assert reset.player_order == []
    assert reset.started is False
    assert reset.turn_index == 0
    assert reset.phase == 'rolling'
    assert reset.dice is None
    assert reset.neutral_pieces == {}
    assert reset.winner is None
    assert reset.locked_columns == {}
    assert reset.chats == state.chats


def test_removing_earlier_player_shifts_turn_back():
    state = seated('p1', 'p2', 'p3').evolve(turn_index=2)
    removed = remove_player(state, 'p1')
    assert removed.player_order == ['p2', 'p3']
    assert removed.turn_index == 1
    assert removed.player_order[removed.turn_index] == 'p3'


def test_removing_later_player_keeps_turn():
    state = seated('p1', 'p2', 'p3').evolve(turn_index=0, neutral_pieces={7: 2})
    removed = remove_player(state, 'p3')
    assert removed.turn_index == 0
    assert removed.neutral_pieces == {7: 2}


def test_removing_active_player_discards_turn():
    state = seated('p1', 'p2', 'p3').evolve(
        turn_index=1,
        phase='pairing',
        dice=[1, 2, 3, 4],
        neutral_pieces={7: 2},
    )
    removed = remove_player(state, 'p2')
    assert removed.turn_index == 0
    assert removed.neutral_pieces == {}
    assert removed.dice is None
    assert removed.phase == 'rolling'


def test_removing_first_player_while_active_wraps_to_zero():
    state = seated('p1', 'p2').evolve(turn_index=0)
    removed = remove_player(state, 'p1')
    assert removed.turn_index == 0
    assert removed.player_order == ['p2']


def test_removing_player_strips_their_pieces():
    state = seated('p1', 'p2').evolve(pieces={
        5: [{'playerId': 'p1', 'slot': 2}],
        7: [{'playerId': 'p1', 'slot': 4}, {'playerId': 'p2', 'slot': 1}],
    })
    removed = remove_player(state, 'p1')
    assert removed.pieces == {7: [{'playerId': 'p2', 'slot': 1}]}


def test_removing_unknown_player_is_ignored():
    state = seated('p1', 'p2').evolve(turn_index=1)
    assert remove_player(state, 'ghost') is state
