"""Execution backends: spawn a command, then learn when *some* command ends."""

from __future__ import annotations

import itertools
import queue
import subprocess
import threading
import time
from collections.abc import Sequence
from typing import Protocol

import structlog

from .exceptions import SpawnFailure

logger = structlog.get_logger(__name__)

ExecutionHandle = int


class ExecutionBackend(Protocol):
    def spawn(self, argv: Sequence[str]) -> ExecutionHandle: ...

    def join_any(self) -> ExecutionHandle: ...

    def sleep(self, duration_ms: int) -> None: ...

    def close(self) -> None: ...


class ProcessBackend:
    """Run commands as host processes.

    Every child gets a daemon watcher thread that waits on it and posts the
    child's handle to one shared completion queue. :meth:`join_any` reads
    that queue, so callers learn that a unit finished without choosing which.
    """

    def __init__(
        self,
        *,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        self.cwd = cwd
        self.env = dict(env) if env is not None else None
        self._ids = itertools.count(1)
        self._completions: queue.Queue[ExecutionHandle] = queue.Queue()
        self._processes: dict[ExecutionHandle, subprocess.Popen[bytes]] = {}
        self._lock = threading.Lock()
        self._closed = False

    def spawn(self, argv: Sequence[str]) -> ExecutionHandle:
        if self._closed:
            raise SpawnFailure(argv, "backend is closed")
        if not argv:
            raise SpawnFailure(argv, "missing command")
        try:
            process = subprocess.Popen(list(argv), cwd=self.cwd, env=self.env)
        except FileNotFoundError as exc:
            raise SpawnFailure(argv, "command not found") from exc
        except PermissionError as exc:
            raise SpawnFailure(argv, "permission denied") from exc
        except OSError as exc:
            raise SpawnFailure(argv, exc.strerror or str(exc)) from exc
        except ValueError as exc:
            raise SpawnFailure(argv, str(exc)) from exc
        handle = next(self._ids)
        with self._lock:
            self._processes[handle] = process
        watcher = threading.Thread(
            target=self._watch,
            args=(handle, process),
            name=f"bshell-watch-{handle}",
            daemon=True,
        )
        watcher.start()
        logger.debug("unit_spawned", handle=handle, pid=process.pid, argv=list(argv))
        return handle

    def _watch(self, handle: ExecutionHandle, process: subprocess.Popen[bytes]) -> None:
        returncode = process.wait()
        with self._lock:
            self._processes.pop(handle, None)
        logger.debug("unit_finished", handle=handle, returncode=returncode)
        self._completions.put(handle)

    def join_any(self) -> ExecutionHandle:
        return self._completions.get()

    def sleep(self, duration_ms: int) -> None:
        time.sleep(duration_ms / 1000)

    def outstanding(self) -> list[ExecutionHandle]:
        with self._lock:
            return sorted(self._processes)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        running = self.outstanding()
        if running:
            logger.info("backend_closed_with_running_units", handles=running)
        else:
            logger.debug("backend_closed")


__all__ = ["ExecutionBackend", "ExecutionHandle", "ProcessBackend"]
