from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from . import board as b
from .board import Cells, Mark, Status
from .errors import IllegalMove, UndoUnavailable
from .events import (
    EventBus,
    GAME_ENDED,
    GAME_RESET,
    MOVE_APPLIED,
    MOVE_UNDONE,
    TURN_CHANGED,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    """One placement: which cell and whose mark."""
    index: int
    player: Mark


@dataclass
class GameSession:
    """
    The state of one game: board, move history, turn and active flag.

    All mutation goes through the methods below. Each mutation replaces `cells`
    with a new tuple, so snapshots handed out earlier stay valid.
    """
    first_player: Mark = Mark.HUMAN
    cells: Cells = b.EMPTY_BOARD
    history: List[Move] = field(default_factory=list)
    current: Mark = Mark.HUMAN
    active: bool = True
    events: EventBus = field(default_factory=EventBus, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.first_player is Mark.EMPTY:
            raise ValueError("first_player must be HUMAN or COMPUTER")
        if not self.history and self.cells == b.EMPTY_BOARD:
            self.current = self.first_player

    # ---------- queries ----------

    def check_win(self, player: Mark, board: Optional[Sequence[Mark]] = None) -> bool:
        return b.check_win(self.cells if board is None else board, player)

    def check_draw(self, board: Optional[Sequence[Mark]] = None) -> bool:
        return b.check_draw(self.cells if board is None else board)

    def classify(self, board: Optional[Sequence[Mark]] = None) -> Status:
        return b.classify(self.cells if board is None else board)

    def legal_moves(self) -> List[int]:
        if not self.active:
            return []
        return b.empty_cells(self.cells)

    # ---------- mutation ----------

    def apply_move(self, index: int, player: Mark) -> Move:
        """
        Places `player`'s mark at `index` and records it.

        Does not swap turns. If the placement ends the game the session becomes
        inactive and `game_ended` is emitted after `move_applied`.
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= 8:
            raise IllegalMove(f"cell {index!r} is out of range 0-8")
        if not self.active:
            raise IllegalMove("game is not active")
        if player is not self.current:
            raise IllegalMove(f"it is not {player.name}'s turn")
        if self.cells[index] is not Mark.EMPTY:
            raise IllegalMove(f"cell {index} is already occupied")

        move = Move(index=index, player=player)
        self.cells = b.place(self.cells, index, player)
        self.history.append(move)
        self.events.emit(MOVE_APPLIED, move=move)

        status = b.classify(self.cells)
        if status.is_terminal:
            self.active = False
            logger.info("game ended: %s", status.outcome.value)
            self.events.emit(GAME_ENDED, outcome=status.outcome, line=status.line)
        return move

    def swap_turn(self) -> Mark:
        self.current = self.current.opponent()
        self.events.emit(TURN_CHANGED, player=self.current)
        return self.current

    def undo_last_move(self) -> List[Move]:
        """
        Retracts the human's most recent move.

        When the computer has already replied, its reply goes too (two plies),
        since the human's move alone cannot be removed while the reply stays on
        the board. When the last move is the human's own and the turn has not
        been swapped yet, only that move is removed. Returns the removed moves,
        most recent first. The turn always ends on the human.
        """
        if not self.history:
            raise UndoUnavailable("no moves to undo")
        if not self.active:
            raise UndoUnavailable("game is not active")
        if self.current is not Mark.HUMAN:
            raise UndoUnavailable("undo is only available on the human's turn")

        last = self.history[-1]
        if last.player is Mark.COMPUTER:
            if len(self.history) < 2 or self.history[-2].player is not Mark.HUMAN:
                raise UndoUnavailable("no human move to undo")
            count = 2
        else:
            count = 1

        undone: List[Move] = []
        for _ in range(count):
            move = self.history.pop()
            self.cells = b.place(self.cells, move.index, Mark.EMPTY)
            undone.append(move)
            self.events.emit(MOVE_UNDONE, move=move)
        return undone

    def reset(self, starting_player: Mark) -> None:
        if starting_player is Mark.EMPTY:
            raise ValueError("starting_player must be HUMAN or COMPUTER")
        self.cells = b.EMPTY_BOARD
        self.history = []
        self.current = starting_player
        self.first_player = starting_player
        self.active = True
        self.events.emit(GAME_RESET, first_player=starting_player)

    # ---------- helpers ----------

    @classmethod
    def replay(cls, moves: Iterable[Move], first_player: Optional[Mark] = None) -> "GameSession":
        """
        Builds a session by applying `moves` in order from an empty board.
        The turn is swapped after every non-terminal move, so players must alternate.
        """
        moves = list(moves)
        if first_player is None:
            first_player = moves[0].player if moves else Mark.HUMAN
        session = cls(first_player=first_player)
        for move in moves:
            session.apply_move(move.index, move.player)
            if session.active:
                session.swap_turn()
        return session

    def snapshot(self) -> Dict[str, Any]:
        status = self.classify()
        return {
            "cells": b.to_symbols(self.cells),
            "history": [{"index": m.index, "player": m.player.value} for m in self.history],
            "current": self.current.value,
            "active": self.active,
            "firstPlayer": self.first_player.value,
            "status": status.kind,
            "winner": status.winner.value if status.winner else None,
            "line": list(status.line) if status.line else None,
        }
