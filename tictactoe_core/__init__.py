"""
Tic-tac-toe core Python package.

Pure game logic with no presentation concerns, shared by the Flask app,
the command line driver and the tests.
Modules:
- board.py: Mark, WINNING_LINES, classify and other board primitives
- state.py: Move, GameSession (move/undo state machine)
- ai.py: exhaustive minimax search
- events.py: EventBus notifications
- match.py: Match driver, Scoreboard, FirstPlayerPolicy
- sessions.py: per-session locking for the service
"""
