from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from cantstop.models import Game, generate_unique_game_code
from cantstop.services.games.intents import IntentError, StartGame, apply_intent, parse_intent
from cantstop.services.games.lifecycle import has_winner, is_valid_game_code
from cantstop.services.games.roster import available_colors
from cantstop.services.games.store import game_transaction, read_state, reserve_game
from cantstop.socketio_events import broadcast_state
import time


games = Blueprint('games', __name__)


def _dice_rng():
    return current_app.extensions['dice_rng']


def _invalid_code():
    return jsonify({'error': 'Invalid game code'}), 400


def _claim_next_game(prev_state, state):
    """Swap a freshly drawn replay code for an unused one if it is taken."""
    if not state.next_game or state.next_game == prev_state.next_game:
        return state
    if Game.query.filter_by(game_code=state.next_game).first() is None:
        return state
    return state.evolve(next_game=generate_unique_game_code(_dice_rng()))


@games.route('/create', methods=['POST'])
def create_game():
    game = reserve_game(generate_unique_game_code(_dice_rng()))
    current_app.logger.info(f"[create] game={game.game_code}")
    return jsonify({
        'message': 'New game created!',
        'game_code': game.game_code
    }), 201


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    if not is_valid_game_code(game_code):
        return _invalid_code()
    return jsonify(read_state(game_code).to_dict())


@games.route('/<string:game_code>/colors', methods=['GET'])
def get_available_colors(game_code):
    if not is_valid_game_code(game_code):
        return _invalid_code()
    pid = current_user.get_id() if current_user.is_authenticated else None
    return jsonify({'colors': available_colors(read_state(game_code), pid)})


@games.route('/<string:game_code>/action', methods=['POST'])
@login_required
def game_action(game_code):
    if not is_valid_game_code(game_code):
        return _invalid_code()
    try:
        intent = parse_intent(request.get_json(silent=True))
    except IntentError as exc:
        return jsonify({'error': str(exc)}), 400

    pid = current_user.get_id()
    with game_transaction(game_code) as game:
        prev_state = game.load_state()
        if isinstance(intent, StartGame) and not prev_state.started:
            min_players = int(current_app.config.get('MIN_PLAYERS', 2))
            if len(prev_state.players) < min_players:
                return jsonify({'error': f'At least {min_players} players are required to start'}), 400
        result = apply_intent(prev_state, pid, intent, rng=_dice_rng(), now_ms=int(time.time() * 1000))
        result = result._replace(state=_claim_next_game(prev_state, result.state))
        game.save_state(result.state)

    current_app.logger.info(
        f"[action] game={game_code} intent={type(intent).__name__} player={pid} bust={result.bust}"
        + (f" message={result.state.message!r}" if result.state.message else "")
    )
    if has_winner(result.state) and not has_winner(prev_state):
        current_app.logger.info(f"[finish] game={game_code} winner={result.state.winner} next_game={result.state.next_game}")
    broadcast_state(game_code, result.state)
    return jsonify({'ok': True, 'state': result.state.to_dict(), 'bust': result.bust})
