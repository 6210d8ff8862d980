"""bshell package: a line shell with sequential and concurrent command groups."""

from .backends import ExecutionBackend, ExecutionHandle, ProcessBackend
from .console import Console
from .exceptions import InvalidCommandGroup, ReadFailure, ShellError, SpawnFailure
from .groups import CommandGroup, Mode, ParsedLine, split_groups, tokenize
from .shell import BShell, Dispatcher, DispatchResult, LoopState, ShellConfig, ShellState
from .sync import Synchronizer, WaitStrategy

__all__ = [
    "BShell",
    "ShellConfig",
    "ShellState",
    "LoopState",
    "Dispatcher",
    "DispatchResult",
    "Synchronizer",
    "WaitStrategy",
    "CommandGroup",
    "Mode",
    "ParsedLine",
    "split_groups",
    "tokenize",
    "Console",
    "ExecutionBackend",
    "ExecutionHandle",
    "ProcessBackend",
    "ShellError",
    "ReadFailure",
    "InvalidCommandGroup",
    "SpawnFailure",
]
