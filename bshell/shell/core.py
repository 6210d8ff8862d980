"""Core BShell implementation."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from ..backends import ExecutionBackend
from ..console import Console
from ..exceptions import ReadFailure
from ..groups import split_groups, tokenize
from ..sync import Synchronizer
from .common import EXIT_ACKNOWLEDGMENT, DispatchResult, LoopState, ShellConfig, ShellState
from .dispatcher import Dispatcher

logger = structlog.get_logger(__name__)


class BShell:
    """Prompt, read, split and dispatch until the exit sentinel arrives."""

    def __init__(
        self,
        backend: ExecutionBackend,
        *,
        console: Console | None = None,
        config: ShellConfig | None = None,
        teardown: Callable[[], None] | None = None,
    ) -> None:
        self.backend = backend
        self.console = console or Console()
        self.config = config or ShellConfig()
        self.state = ShellState()
        self.synchronizer = Synchronizer(
            backend,
            strategy=self.config.wait_strategy,
            retry_interval_ms=self.config.retry_interval_ms,
        )
        self.dispatcher = Dispatcher(backend, self.synchronizer, self.console.error)
        self._teardown = teardown if teardown is not None else backend.close
        self._torn_down = False

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------
    def run(self) -> int:
        try:
            while self.state.loop_state is LoopState.RUNNING:
                self.step()
        finally:
            self.close()
        return 0

    def step(self) -> DispatchResult | None:
        """Run one prompt/read/dispatch cycle."""
        self._collect_background()
        self.prompt()
        try:
            line = self.console.read_line()
        except ReadFailure as exc:
            self._report_read_failure(exc)
            return None
        if line is None:
            logger.debug("end_of_input", line_number=self.state.line_number)
            self._terminate()
            return None
        return self._handle(line)

    def prompt(self) -> None:
        self.console.write(self.config.prompt(self.state.line_number))

    def execute(self, line: str) -> DispatchResult | None:
        """Split and dispatch ``line`` without prompting.

        Returns ``None`` when the line could not be tokenized or requested
        termination.
        """
        return self._handle(line)

    def close(self) -> None:
        """Tear the environment down; later calls do nothing."""
        if self._torn_down:
            return
        self._torn_down = True
        logger.debug("shell_terminated", line_number=self.state.line_number)
        self._teardown()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _handle(self, line: str) -> DispatchResult | None:
        try:
            tokens = tokenize(line)
        except ReadFailure as exc:
            self._report_read_failure(exc)
            return None
        parsed = split_groups(tokens)
        if parsed.terminate:
            self._terminate()
            return None
        return self.dispatcher.dispatch(self.state, parsed)

    def _terminate(self) -> None:
        self.console.write(EXIT_ACKNOWLEDGMENT)
        self.state.terminated = True

    def _collect_background(self) -> None:
        for handle in self.synchronizer.collect():
            logger.info("background_finished", handle=handle)

    def _report_read_failure(self, exc: ReadFailure) -> None:
        logger.warning("read_failed", error=str(exc))
        self.console.error(str(exc))


__all__ = ["BShell"]
