from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from typing import Callable, Iterator, Tuple

from .match import Match

logger = logging.getLogger(__name__)


class SessionStore:
    """
    In-memory registry of matches keyed by an opaque id.

    A GameSession is not safe for concurrent use, so every match gets its own
    lock and callers mutate it only inside `locked()`. When more than
    `max_sessions` are live, the oldest one is dropped.
    """

    def __init__(self, factory: Callable[[], Match], max_sessions: int = 1000) -> None:
        self._factory = factory
        self._max = max_sessions
        self._items: "OrderedDict[str, Tuple[Match, threading.Lock]]" = OrderedDict()
        self._guard = threading.Lock()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, sid: object) -> bool:
        return sid in self._items

    def create(self) -> Tuple[str, Match]:
        with self.created() as pair:
            return pair

    @contextmanager
    def created(self) -> Iterator[Tuple[str, Match]]:
        """
        Registers a new match and yields (id, match) with its lock already held.

        The match object stays usable inside the block even if a later
        `create()` evicts its id from the store.
        """
        sid = uuid.uuid4().hex
        match = self._factory()
        lock = threading.Lock()
        with lock:
            with self._guard:
                self._items[sid] = (match, lock)
                while len(self._items) > self._max:
                    old, _ = self._items.popitem(last=False)
                    logger.info("session %s evicted", old)
            logger.info("session %s created", sid)
            yield sid, match

    def get(self, sid: str) -> Match:
        with self._guard:
            if sid not in self._items:
                raise KeyError(sid)
            return self._items[sid][0]

    @contextmanager
    def locked(self, sid: str) -> Iterator[Match]:
        """Yields the match for `sid` while holding its lock. Raises KeyError for unknown ids."""
        with self._guard:
            if sid not in self._items:
                raise KeyError(sid)
            match, lock = self._items[sid]
        with lock:
            yield match

    def drop(self, sid: str) -> bool:
        with self._guard:
            return self._items.pop(sid, None) is not None
