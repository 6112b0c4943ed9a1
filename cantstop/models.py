from cantstop import db
from flask_login import UserMixin
from cantstop.services.games.lifecycle import generate_game_code
from cantstop.services.games.state import GameState
import json
import time


class PlayerIdentity(UserMixin):
    """A browser's stable player id. Lives only in the session cookie."""

    def __init__(self, pid):
        self.id = pid

    def to_dict(self):
        return {'pid': self.id}


def generate_unique_game_code(rng=None):
    """Generate a game code no stored game uses yet."""
    while True:
        code = generate_game_code(rng)
        if not Game.query.filter_by(game_code=code).first():
            return code


class Game(db.Model):
    __tablename__ = 'game_state'
    id = db.Column(db.Integer, primary_key=True)
    game_code = db.Column(db.String(5), unique=True, index=True, nullable=False)
    state = db.Column(db.Text, nullable=False, default='{}')  # JSON-encoded GameState
    created_at = db.Column(db.Float, default=time.time)
    updated_at = db.Column(db.Float, default=time.time, onupdate=time.time)

    def load_state(self) -> GameState:
        try:
            data = json.loads(self.state or '{}')
        except ValueError:
            data = {}
        return GameState.from_dict(data)

    def save_state(self, state: GameState) -> None:
        self.state = json.dumps(state.to_dict())

    def to_dict(self):
        return {
            'game_code': self.game_code,
            'state': self.load_state().to_dict(),
            'updated_at': self.updated_at,
        }
