from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union


class Mark(Enum):
    """The value of a single cell."""
    EMPTY = ""
    HUMAN = "x"
    COMPUTER = "o"

    def opponent(self) -> "Mark":
        if self is Mark.HUMAN:
            return Mark.COMPUTER
        if self is Mark.COMPUTER:
            return Mark.HUMAN
        raise ValueError("EMPTY has no opponent")


class Outcome(Enum):
    HUMAN_WIN = "human_win"
    COMPUTER_WIN = "computer_win"
    DRAW = "draw"


Cells = Tuple[Mark, ...]  # row-major, length 9
Line = Tuple[int, int, int]

EMPTY_BOARD: Cells = (Mark.EMPTY,) * 9

WINNING_LINES: Tuple[Line, ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)

ONGOING = "ongoing"
WIN = "win"
DRAW = "draw"


@dataclass(frozen=True)
class Status:
    """Classification of a board: ongoing, won by one player, or drawn."""
    kind: str
    winner: Optional[Mark] = None
    line: Optional[Line] = None

    @property
    def is_terminal(self) -> bool:
        return self.kind != ONGOING

    @property
    def outcome(self) -> Optional[Outcome]:
        if self.kind == DRAW:
            return Outcome.DRAW
        if self.kind == WIN:
            return Outcome.HUMAN_WIN if self.winner is Mark.HUMAN else Outcome.COMPUTER_WIN
        return None


def check_win(board: Sequence[Mark], player: Mark) -> bool:
    """True iff some winning line holds three marks of `player`."""
    if player is Mark.EMPTY:
        return False
    return any(all(board[i] is player for i in line) for line in WINNING_LINES)


def check_draw(board: Sequence[Mark]) -> bool:
    """True iff every cell is occupied. Check wins first: a full board can also be won."""
    return all(cell is not Mark.EMPTY for cell in board)


def winning_line(board: Sequence[Mark]) -> Optional[Line]:
    """Returns the first completed line in WINNING_LINES order, if any."""
    for a, b, c in WINNING_LINES:
        if board[a] is not Mark.EMPTY and board[a] is board[b] is board[c]:
            return (a, b, c)
    return None


def classify(board: Sequence[Mark]) -> Status:
    """Single authoritative status function. A win takes precedence over a full board."""
    line = winning_line(board)
    if line is not None:
        return Status(WIN, winner=board[line[0]], line=line)
    if check_draw(board):
        return Status(DRAW)
    return Status(ONGOING)


def empty_cells(board: Sequence[Mark]) -> List[int]:
    return [i for i, cell in enumerate(board) if cell is Mark.EMPTY]


def place(board: Cells, index: int, mark: Mark) -> Cells:
    """Returns a copy of `board` with one cell set; the input is never modified."""
    lst = list(board)
    lst[index] = mark
    return tuple(lst)


_SYMBOLS = {
    "x": Mark.HUMAN,
    "o": Mark.COMPUTER,
    "": Mark.EMPTY,
    "-": Mark.EMPTY,
    "_": Mark.EMPTY,
    ".": Mark.EMPTY,
}


def _to_mark(value: Union[Mark, str, None]) -> Mark:
    if isinstance(value, Mark):
        return value
    if value is None:
        return Mark.EMPTY
    key = str(value).strip().lower()
    if key not in _SYMBOLS:
        raise ValueError(f"unknown cell symbol: {value!r}")
    return _SYMBOLS[key]


def validate_cells(values: Iterable[Union[Mark, str, None]]) -> Cells:
    """
    Parses a 9-item board into a Cells tuple.
    Accepts Mark values or the symbols 'x', 'o' and '', '-', '_', '.', None for empty.
    A plain string such as "x-o-x----" is read one character per cell.
    """
    cells = tuple(_to_mark(v) for v in values)
    if len(cells) != 9:
        raise ValueError(f"board must have 9 cells, got {len(cells)}")
    humans = cells.count(Mark.HUMAN)
    computers = cells.count(Mark.COMPUTER)
    if abs(humans - computers) > 1:
        raise ValueError(f"mark counts differ by more than one ({humans} x, {computers} o)")
    if check_win(cells, Mark.HUMAN) and check_win(cells, Mark.COMPUTER):
        raise ValueError("both players have a completed line")
    return cells


def to_symbols(board: Sequence[Mark]) -> List[str]:
    return [cell.value for cell in board]


def pretty(board: Sequence[Mark]) -> str:
    """Plain text rendering; empty cells show their index."""
    rows: List[str] = []
    for r in range(3):
        row = []
        for c in range(3):
            idx = r * 3 + c
            cell = board[idx]
            row.append(cell.value.upper() if cell is not Mark.EMPTY else str(idx))
        rows.append(" | ".join(row))
    return "\n---------\n".join(rows)
