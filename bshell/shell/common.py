"""Shared shell types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..backends import ExecutionHandle
from ..exceptions import ShellError
from ..sync import DEFAULT_RETRY_INTERVAL_MS, WaitStrategy

DEFAULT_PROMPT = "b-shell[{line}]% "
EXIT_ACKNOWLEDGMENT = "Exit called...terminating\n"


class LoopState(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass(slots=True)
class ShellState:
    line_number: int = 1
    terminated: bool = False

    @property
    def loop_state(self) -> LoopState:
        return LoopState.TERMINATED if self.terminated else LoopState.RUNNING


@dataclass(frozen=True, slots=True)
class ShellConfig:
    retry_interval_ms: int = DEFAULT_RETRY_INTERVAL_MS
    wait_strategy: WaitStrategy = WaitStrategy.PENDING
    prompt_template: str = DEFAULT_PROMPT

    def prompt(self, line_number: int) -> str:
        return self.prompt_template.format(line=line_number)


@dataclass(slots=True)
class DispatchResult:
    spawned: list[ExecutionHandle] = field(default_factory=list)
    waited: list[ExecutionHandle] = field(default_factory=list)
    errors: list[ShellError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


__all__ = [
    "DEFAULT_PROMPT",
    "EXIT_ACKNOWLEDGMENT",
    "DispatchResult",
    "LoopState",
    "ShellConfig",
    "ShellState",
]
