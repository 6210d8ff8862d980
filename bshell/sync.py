"""Selective waits on top of a non-selective completion primitive."""

from __future__ import annotations

from enum import Enum

import structlog

from .backends import ExecutionBackend, ExecutionHandle

logger = structlog.get_logger(__name__)

DEFAULT_RETRY_INTERVAL_MS = 10


class WaitStrategy(Enum):
    """What happens to a completion that belongs to a different unit."""

    DISCARD = "discard"
    PENDING = "pending"


class Synchronizer:
    """Block until a specific handle is reported finished.

    ``backend.join_any()`` returns whichever unit ends next, so a wait for
    one handle can observe completions of others (typically background
    groups). With ``WaitStrategy.DISCARD`` those completions are dropped and
    can never be observed again. With ``WaitStrategy.PENDING`` they are kept
    in a registry that :meth:`wait_for` consults before blocking and that
    :meth:`collect` drains.
    """

    def __init__(
        self,
        backend: ExecutionBackend,
        *,
        strategy: WaitStrategy = WaitStrategy.PENDING,
        retry_interval_ms: int = DEFAULT_RETRY_INTERVAL_MS,
    ) -> None:
        if retry_interval_ms < 0:
            raise ValueError("retry_interval_ms must be non-negative")
        self.backend = backend
        self.strategy = strategy
        self.retry_interval_ms = retry_interval_ms
        self.discarded = 0
        self._pending: set[ExecutionHandle] = set()

    def wait_for(self, target: ExecutionHandle) -> None:
        if target in self._pending:
            self._pending.discard(target)
            logger.debug("completion_already_pending", handle=target)
            return
        while True:
            finished = self.backend.join_any()
            if finished == target:
                return
            self._unmatched(finished, target)
            self.backend.sleep(self.retry_interval_ms)

    def _unmatched(self, finished: ExecutionHandle, target: ExecutionHandle) -> None:
        if self.strategy is WaitStrategy.PENDING:
            self._pending.add(finished)
            logger.debug("completion_deferred", handle=finished, waiting_for=target)
            return
        self.discarded += 1
        logger.debug("completion_discarded", handle=finished, waiting_for=target)

    def pending(self) -> list[ExecutionHandle]:
        return sorted(self._pending)

    def collect(self) -> list[ExecutionHandle]:
        """Return and forget every completion recorded while waiting."""
        drained = sorted(self._pending)
        self._pending.clear()
        return drained


__all__ = ["DEFAULT_RETRY_INTERVAL_MS", "Synchronizer", "WaitStrategy"]
