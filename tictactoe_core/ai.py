from __future__ import annotations

import logging
from typing import Dict, Sequence

from .board import Cells, Mark, Outcome, classify, empty_cells, place

logger = logging.getLogger(__name__)

SCORES = {
    Outcome.COMPUTER_WIN: 1,
    Outcome.HUMAN_WIN: -1,
    Outcome.DRAW: 0,
}


class _Counter:
    def __init__(self) -> None:
        self.positions = 0


def _minimax(board: Cells, is_computer_turn: bool, counter: _Counter) -> int:
    counter.positions += 1
    status = classify(board)
    if status.is_terminal:
        return SCORES[status.outcome]

    mover = Mark.COMPUTER if is_computer_turn else Mark.HUMAN
    scores = [
        _minimax(place(board, idx, mover), not is_computer_turn, counter)
        for idx in empty_cells(board)
    ]
    return max(scores) if is_computer_turn else min(scores)


def minimax(board: Sequence[Mark], is_computer_turn: bool) -> int:
    """
    Exhaustive minimax value of `board` from the computer's point of view:
    +1 computer wins, -1 human wins, 0 draw, under optimal play by both sides.
    Every branch works on its own tuple; no depth limit, no memoization.
    """
    return _minimax(tuple(board), is_computer_turn, _Counter())


def _check_searchable(board: Cells) -> None:
    if len(board) != 9:
        raise ValueError(f"board must have 9 cells, got {len(board)}")
    status = classify(board)
    if status.is_terminal:
        raise ValueError(f"cannot search a terminal board ({status.kind})")


def score_moves(board: Sequence[Mark]) -> Dict[int, int]:
    """Minimax value of every empty cell if the computer plays there, keyed by cell index."""
    cells = tuple(board)
    _check_searchable(cells)
    counter = _Counter()
    scores = {
        idx: _minimax(place(cells, idx, Mark.COMPUTER), False, counter)
        for idx in empty_cells(cells)
    }
    logger.debug("evaluated %d positions for %d candidate moves", counter.positions, len(scores))
    return scores


def best_move(board: Sequence[Mark]) -> int:
    """
    The computer's optimal cell: the first cell in index order with the maximal score.
    The board must be non-terminal; calling this on a won or full board is a
    programming error and raises ValueError.
    """
    scores = score_moves(board)
    best_idx = -1
    best_score = -2
    for idx, score in scores.items():  # insertion order is index order
        if score > best_score:
            best_idx, best_score = idx, score
    logger.debug("best move %d (score %d)", best_idx, best_score)
    return best_idx
