from __future__ import annotations


class GameError(Exception):
    """Base class for rejected game operations. The session is left unchanged."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class IllegalMove(GameError, ValueError):
    """Out-of-range index, occupied cell, wrong turn, or inactive game."""


class UndoUnavailable(GameError):
    """Empty history, inactive game, not the human's turn, or no human move to retract."""
