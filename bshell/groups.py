"""Split a token line into sequential and concurrent command groups."""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import InvalidCommandGroup, ReadFailure

SEQUENTIAL_DELIMITER = ";"
CONCURRENT_DELIMITER = "&"
EXIT_SENTINEL = "exit"


class Mode(Enum):
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


_DELIMITERS = {
    SEQUENTIAL_DELIMITER: Mode.SEQUENTIAL,
    CONCURRENT_DELIMITER: Mode.CONCURRENT,
}


@dataclass(frozen=True, slots=True)
class CommandGroup:
    argv: tuple[str, ...]
    mode: Mode = Mode.SEQUENTIAL

    def __post_init__(self) -> None:
        if not self.argv:
            raise ValueError("CommandGroup requires at least one token")

    @property
    def program(self) -> str:
        return self.argv[0]


Segment = CommandGroup | InvalidCommandGroup


@dataclass
class ParsedLine:
    tokens: list[str]
    segments: list[Segment] = field(default_factory=list)
    terminate: bool = False

    @property
    def groups(self) -> list[CommandGroup]:
        return [seg for seg in self.segments if isinstance(seg, CommandGroup)]

    @property
    def errors(self) -> list[InvalidCommandGroup]:
        return [seg for seg in self.segments if isinstance(seg, InvalidCommandGroup)]


def tokenize(line: str) -> list[str]:
    """Break a raw input line into whitespace separated tokens."""
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        return list(lexer)
    except ValueError as exc:
        raise ReadFailure(f"cannot tokenize input: {exc}") from exc


def split_groups(tokens: Sequence[str]) -> ParsedLine:
    """Partition ``tokens`` into command groups.

    ``&`` closes the pending group as concurrent, ``;`` closes it as
    sequential, and trailing tokens with no delimiter form a final sequential
    group. A line consisting solely of ``exit`` produces no groups and sets
    ``terminate`` instead. Closing an empty group yields an
    :class:`InvalidCommandGroup` in place of that segment; scanning carries on.
    """
    tokens = list(tokens)
    if tokens == [EXIT_SENTINEL]:
        return ParsedLine(tokens=tokens, terminate=True)

    parsed = ParsedLine(tokens=tokens)
    pending: list[str] = []
    for position, token in enumerate(tokens):
        mode = _DELIMITERS.get(token)
        if mode is None:
            pending.append(token)
            continue
        _close_group(parsed, pending, mode, token, position)
        pending = []

    if pending:
        parsed.segments.append(CommandGroup(tuple(pending), Mode.SEQUENTIAL))
    return parsed


def _close_group(
    parsed: ParsedLine,
    pending: list[str],
    mode: Mode,
    delimiter: str,
    position: int,
) -> None:
    if not pending:
        parsed.segments.append(InvalidCommandGroup(delimiter, position))
        return
    parsed.segments.append(CommandGroup(tuple(pending), mode))


__all__ = [
    "CONCURRENT_DELIMITER",
    "EXIT_SENTINEL",
    "SEQUENTIAL_DELIMITER",
    "CommandGroup",
    "Mode",
    "ParsedLine",
    "Segment",
    "split_groups",
    "tokenize",
]
