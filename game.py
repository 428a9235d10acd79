from __future__ import annotations

# Facade module that re-exports the tic-tac-toe core.
# The Flask app, the tools and the tests import from here.
# Single-responsibility modules live under tictactoe_core/*.

from tictactoe_core.board import (  # noqa: F401
    Cells,
    EMPTY_BOARD,
    Line,
    Mark,
    Outcome,
    Status,
    WINNING_LINES,
    check_draw,
    check_win,
    classify,
    empty_cells,
    place,
    pretty,
    to_symbols,
    validate_cells,
    winning_line,
)
from tictactoe_core.state import GameSession, Move  # noqa: F401
from tictactoe_core.errors import GameError, IllegalMove, UndoUnavailable  # noqa: F401
from tictactoe_core.events import (  # noqa: F401
    EventBus,
    EVENT_NAMES,
    GAME_ENDED,
    GAME_RESET,
    MOVE_APPLIED,
    MOVE_UNDONE,
    TURN_CHANGED,
)
from tictactoe_core.ai import best_move, minimax, score_moves  # noqa: F401
from tictactoe_core.match import FirstPlayerPolicy, Match, Scoreboard  # noqa: F401
from tictactoe_core.sessions import SessionStore  # noqa: F401
from tictactoe_core.config import Settings, configure_logging  # noqa: F401


def new_match(first: str = "alternate", think_delay_ms: int = 0) -> Match:
    """Convenience constructor used by the app and the tools."""
    return Match(policy=FirstPlayerPolicy(first), think_delay_ms=think_delay_ms)


def main() -> None:
    # CLI driver delegated to tictactoe_core.cli
    from tictactoe_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
