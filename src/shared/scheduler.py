"""Delayed-callback port used for UX pacing (checkout handoff and recovery)."""

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

import structlog
from protean.domain import Domain

logger = structlog.get_logger(__name__)


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> None: ...


class ThreadingScheduler(Scheduler):
    """Runs callbacks on timer threads inside the given domain's context."""

    def __init__(self, domain: Domain) -> None:
        self._domain = domain

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        timer = threading.Timer(delay, self._run, args=(callback,))
        timer.daemon = True
        timer.start()

    def _run(self, callback: Callable[[], None]) -> None:
        try:
            with self._domain.domain_context():
                callback()
        except Exception:
            logger.exception("Scheduled callback failed", callback=getattr(callback, "__name__", repr(callback)))


class ImmediateScheduler(Scheduler):
    """Runs callbacks synchronously, ignoring the delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:  # noqa: ARG002
        callback()


class ManualScheduler(Scheduler):
    """Queues callbacks until ``run_pending`` is called."""

    def __init__(self) -> None:
        self.pending: list[tuple[float, Callable[[], None]]] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self.pending.append((delay, callback))

    def run_pending(self) -> int:
        ran = 0
        while self.pending:
            _, callback = self.pending.pop(0)
            callback()
            ran += 1
        return ran
