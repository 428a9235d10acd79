from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .ai import best_move
from .board import Line, Mark, Outcome, Status
from .config import FIRST_PLAYER_POLICIES
from .errors import IllegalMove
from .events import GAME_ENDED
from .state import GameSession, Move

logger = logging.getLogger(__name__)


class FirstPlayerPolicy:
    """Decides who opens each game. `alternate` flips the opener on every restart."""

    def __init__(self, mode: str = "alternate", initial: Mark = Mark.HUMAN) -> None:
        if mode not in FIRST_PLAYER_POLICIES:
            raise ValueError(f"unknown first-player policy: {mode!r}")
        self.mode = mode
        self.initial = initial

    def first(self) -> Mark:
        if self.mode == "human":
            return Mark.HUMAN
        if self.mode == "computer":
            return Mark.COMPUTER
        return self.initial

    def next(self, previous: Mark) -> Mark:
        if self.mode == "alternate":
            return previous.opponent()
        return self.first()


@dataclass
class Scoreboard:
    human: int = 0
    computer: int = 0
    draws: int = 0

    def record(self, outcome: Outcome, line: Optional[Line] = None) -> None:
        if outcome is Outcome.HUMAN_WIN:
            self.human += 1
        elif outcome is Outcome.COMPUTER_WIN:
            self.computer += 1
        else:
            self.draws += 1

    def to_dict(self) -> Dict[str, int]:
        return {"human": self.human, "computer": self.computer, "draws": self.draws}


class Match:
    """
    Drives a series of games between the human and the computer.

    Owns one GameSession that is reset between games, the scoreboard, and the
    first-player policy. The thinking delay is only carried here for drivers to
    honour; nothing in this class sleeps.
    """

    def __init__(
        self,
        policy: Optional[FirstPlayerPolicy] = None,
        think_delay_ms: int = 0,
        session: Optional[GameSession] = None,
    ) -> None:
        self.policy = policy or FirstPlayerPolicy()
        self.think_delay_ms = think_delay_ms
        self.scoreboard = Scoreboard()
        self.session = session or GameSession(first_player=self.policy.first())
        self.session.events.subscribe(GAME_ENDED, self.scoreboard.record)
        self.games_started = 0

    @property
    def events(self):
        return self.session.events

    def start(self, first: Optional[Mark] = None) -> List[Move]:
        """Resets the board for a new game. Returns the computer's opening move, if it opens."""
        self.session.reset(first or self.policy.first())
        self.games_started += 1
        logger.info("game %d started, %s opens", self.games_started, self.session.first_player.name)
        return self._computer_if_due()

    def restart(self, first: Optional[Mark] = None) -> List[Move]:
        """Starts the next game; without `first` the policy picks the opener."""
        return self.start(first or self.policy.next(self.session.first_player))

    def status(self) -> Status:
        return self.session.classify()

    def human_move(self, index: int) -> Move:
        """Applies the human's move and hands the turn to the computer unless the game ended."""
        move = self.session.apply_move(index, Mark.HUMAN)
        if self.session.active:
            self.session.swap_turn()
        return move

    def computer_move(self) -> Move:
        if not self.session.active:
            raise IllegalMove("game is not active")
        if self.session.current is not Mark.COMPUTER:
            raise IllegalMove("it is not the computer's turn")
        index = best_move(self.session.cells)
        move = self.session.apply_move(index, Mark.COMPUTER)
        if self.session.active:
            self.session.swap_turn()
        return move

    def play_human_turn(self, index: int) -> List[Move]:
        """Human move followed by the computer's reply when the game is still on."""
        moves = [self.human_move(index)]
        moves.extend(self._computer_if_due())
        return moves

    def undo(self) -> List[Move]:
        return self.session.undo_last_move()

    def _computer_if_due(self) -> List[Move]:
        if self.session.active and self.session.current is Mark.COMPUTER:
            return [self.computer_move()]
        return []

    def to_dict(self) -> Dict[str, Any]:
        data = self.session.snapshot()
        data["scoreboard"] = self.scoreboard.to_dict()
        data["policy"] = self.policy.mode
        data["thinkingDelayMs"] = self.think_delay_ms
        return data
