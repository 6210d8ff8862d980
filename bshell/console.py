"""Console I/O collaborator: line input, prompt output, error reports."""

from __future__ import annotations

import sys
from typing import TextIO

from .exceptions import ReadFailure


class Console:
    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr

    def write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def error(self, message: str) -> None:
        self.stderr.write(f"ERROR: {message}\n")
        self.stderr.flush()

    def read_line(self) -> str | None:
        """Return the next line without its newline, or ``None`` at end of input."""
        try:
            line = self.stdin.readline()
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise ReadFailure(f"read input: {exc}") from exc
        if line == "":
            return None
        return line.rstrip("\r\n")


__all__ = ["Console"]
