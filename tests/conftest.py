from __future__ import annotations

import io
import logging
from collections import deque
from collections.abc import Sequence

import pytest

from bshell import Console
from bshell.exceptions import SpawnFailure
from bshell.log import configure_logging


class FakeBackend:
    """Scripted backend that records every primitive call in order.

    Handles are handed out from 1 upward. ``join_any`` reports units from
    ``finish_order`` when given, otherwise in spawn order.
    """

    def __init__(
        self,
        finish_order: Sequence[int] | None = None,
        *,
        missing: Sequence[str] = (),
    ) -> None:
        self.events: list[tuple] = []
        self.missing = set(missing)
        self.closed = 0
        self._next = 1
        self._scripted = deque(finish_order) if finish_order is not None else None
        self._running: deque[int] = deque()

    def spawn(self, argv: Sequence[str]) -> int:
        if argv[0] in self.missing:
            self.events.append(("spawn_failed", tuple(argv)))
            raise SpawnFailure(argv, "command not found")
        handle = self._next
        self._next += 1
        self._running.append(handle)
        self.events.append(("spawn", tuple(argv), handle))
        return handle

    def join_any(self) -> int:
        if self._scripted is not None:
            handle = self._scripted.popleft()
            self._running.remove(handle)
        else:
            handle = self._running.popleft()
        self.events.append(("join", handle))
        return handle

    def sleep(self, duration_ms: int) -> None:
        self.events.append(("sleep", duration_ms))

    def close(self) -> None:
        self.closed += 1

    def spawned(self) -> list[tuple[str, ...]]:
        return [event[1] for event in self.events if event[0] == "spawn"]

    def kinds(self) -> list[str]:
        return [event[0] for event in self.events]


def make_console(text: str = "") -> Console:
    return Console(stdin=io.StringIO(text), stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture(autouse=True)
def quiet_logging():
    configure_logging(logging.CRITICAL)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
