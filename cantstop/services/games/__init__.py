"""Game domain services: the Can't Stop rules engine and its state store.

Everything except ``store`` is pure: functions take a ``GameState`` and
return a new one. The Flask blueprints and Socket.IO handlers only parse
requests, run a transition inside ``store.game_transaction`` and publish
the result.
"""
