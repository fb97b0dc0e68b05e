"""Explicit observer registry for configuration changes made before freezing.

Handlers subscribe to a dotted path and are called as
``handler(path, old_value, new_value)`` whenever :meth:`WatchRegistry.notify`
reports a real change for that path.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Any, Final

from .errors import RecursionLimitExceededError
from .structural import equals_deep

logger = logging.getLogger(__name__)

MAX_ITERATIONS: Final[int] = 20
"""Upper bound of dispatch rounds for a single path."""

WatchHandler = Callable[[str, Any, Any], None]


class WatchRegistry:
    """Per-configuration registry of change handlers keyed by dotted path.

    Notifications raised from inside a handler for the path being dispatched
    are queued and delivered by the running dispatch loop. The loop gives up
    after ``limit`` rounds and reports the runaway path instead of recursing.

    Example:
        >>> seen = []
        >>> registry = WatchRegistry()
        >>> _ = registry.watch("db.port", lambda path, old, new: seen.append((old, new)))
        >>> registry.notify("db.port", 5432, 5433) is None
        True
        >>> registry.notify("db.port", 5433, 5433) is None
        True
        >>> seen
        [(5432, 5433)]
    """

    def __init__(self, limit: int = MAX_ITERATIONS) -> None:
        self._limit = limit
        self._handlers: dict[str, list[WatchHandler]] = {}
        self._pending: dict[str, deque[tuple[Any, Any]]] = {}

    def watch(self, path: str, handler: WatchHandler) -> Callable[[], None]:
        """Register *handler* for *path* and return a function that unregisters it."""
        self._handlers.setdefault(path, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(path, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def handlers(self, path: str) -> list[WatchHandler]:
        return list(self._handlers.get(path, ()))

    def notify(self, path: str, old_value: Any, new_value: Any) -> RecursionLimitExceededError | None:
        """Dispatch a change of *path* to its handlers.

        Returns:
            None on success, or a :class:`RecursionLimitExceededError` when
            handlers kept re-triggering the same path.
        """
        if equals_deep(old_value, new_value):
            return None

        queue = self._pending.get(path)
        if queue is not None:
            queue.append((old_value, new_value))
            return None

        queue = deque([(old_value, new_value)])
        self._pending[path] = queue
        try:
            rounds = 0
            while queue:
                rounds += 1
                if rounds > self._limit:
                    error = RecursionLimitExceededError(path, self._limit)
                    logger.error(str(error), extra={"path": path, "limit": self._limit})
                    return error
                old, new = queue.popleft()
                self._dispatch(path, old, new)
        finally:
            del self._pending[path]
        return None

    def _dispatch(self, path: str, old_value: Any, new_value: Any) -> None:
        for handler in self.handlers(path):
            try:
                handler(path, old_value, new_value)
            except Exception as exc:
                logger.error(
                    "Watch handler failed",
                    extra={"path": path, "error": str(exc), "error_type": type(exc).__name__},
                    exc_info=True,
                )


__all__ = [
    "MAX_ITERATIONS",
    "WatchHandler",
    "WatchRegistry",
]
