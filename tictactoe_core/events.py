from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

MOVE_APPLIED = "move_applied"
TURN_CHANGED = "turn_changed"
GAME_ENDED = "game_ended"
MOVE_UNDONE = "move_undone"
GAME_RESET = "game_reset"

EVENT_NAMES = (MOVE_APPLIED, TURN_CHANGED, GAME_ENDED, MOVE_UNDONE, GAME_RESET)

Listener = Callable[..., None]


class EventBus:
    """
    Minimal synchronous publish/subscribe surface.
    Listeners run in subscription order on the emitting call; their exceptions propagate.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {name: [] for name in EVENT_NAMES}

    def subscribe(self, name: str, listener: Listener) -> Callable[[], None]:
        """Registers `listener` for `name` and returns a callable that removes it."""
        if name not in self._listeners:
            raise ValueError(f"unknown event: {name!r}")
        self._listeners[name].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners[name]
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def emit(self, name: str, **payload: Any) -> None:
        if name not in self._listeners:
            raise ValueError(f"unknown event: {name!r}")
        logger.debug("emit %s %s", name, payload)
        for listener in list(self._listeners[name]):
            listener(**payload)
