"""Spawn each command group of a line, waiting where the delimiter demands."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from ..backends import ExecutionBackend
from ..exceptions import InvalidCommandGroup, ShellError, SpawnFailure
from ..groups import CommandGroup, Mode, ParsedLine
from ..sync import Synchronizer
from .common import DispatchResult, ShellState

logger = structlog.get_logger(__name__)

ErrorReporter = Callable[[str], None]


class Dispatcher:
    """Run the groups of one parsed line against an execution backend."""

    def __init__(
        self,
        backend: ExecutionBackend,
        synchronizer: Synchronizer,
        report: ErrorReporter,
    ) -> None:
        self.backend = backend
        self.synchronizer = synchronizer
        self.report = report

    def dispatch(self, state: ShellState, parsed: ParsedLine) -> DispatchResult:
        result = DispatchResult()
        for segment in parsed.segments:
            if isinstance(segment, InvalidCommandGroup):
                self._fail(result, segment)
                continue
            self._run_group(result, segment)
        if parsed.tokens:
            state.line_number += 1
        return result

    def _run_group(self, result: DispatchResult, group: CommandGroup) -> None:
        try:
            handle = self.backend.spawn(group.argv)
        except SpawnFailure as exc:
            self._fail(result, exc)
            return
        result.spawned.append(handle)
        logger.debug("group_spawned", handle=handle, argv=list(group.argv), mode=group.mode.value)
        if group.mode is Mode.CONCURRENT:
            return
        self.synchronizer.wait_for(handle)
        result.waited.append(handle)

    def _fail(self, result: DispatchResult, error: ShellError) -> None:
        result.errors.append(error)
        logger.warning("group_skipped", error=str(error), kind=type(error).__name__)
        self.report(str(error))


__all__ = ["Dispatcher", "ErrorReporter"]
