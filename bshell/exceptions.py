"""Exception hierarchy for b-shell."""

from __future__ import annotations

from collections.abc import Sequence


class ShellError(Exception):
    """Base class for recoverable shell errors."""


class ReadFailure(ShellError):
    """The console could not produce a line of tokens."""


class InvalidCommandGroup(ShellError):
    """A delimiter closed a group that had no tokens."""

    def __init__(self, delimiter: str, position: int) -> None:
        self.delimiter = delimiter
        self.position = position
        super().__init__(f"empty command before '{delimiter}' at token {position}")


class SpawnFailure(ShellError):
    """The execution backend refused to start a command."""

    def __init__(self, argv: Sequence[str], reason: str) -> None:
        self.argv = tuple(argv)
        self.reason = reason
        name = self.argv[0] if self.argv else "<empty>"
        super().__init__(f"{name}: {reason}")


__all__ = ["ShellError", "ReadFailure", "InvalidCommandGroup", "SpawnFailure"]
