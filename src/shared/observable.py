"""Subscription-based change propagation for shared UI state."""

import threading
from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)


class Observable:
    """Keeps a listener list; ``subscribe`` returns the matching unsubscribe."""

    def __init__(self) -> None:
        self._listeners: list[Callable] = []
        self._lock = threading.RLock()

    def subscribe(self, listener: Callable) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, *args) -> None:
        for listener in list(self._listeners):
            try:
                listener(*args)
            except Exception:
                logger.exception("State listener failed", listener=getattr(listener, "__name__", repr(listener)))
