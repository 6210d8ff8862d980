"""Command-line interface for bshell."""

from __future__ import annotations

import argparse

from .backends import ProcessBackend
from .log import configure_logging
from .shell import BShell, ShellConfig
from .sync import DEFAULT_RETRY_INTERVAL_MS, WaitStrategy


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--discard-unmatched",
        action="store_true",
        help="Drop completions of other commands while waiting (lossy wait).",
    )
    parser.add_argument(
        "--retry-interval",
        type=int,
        default=DEFAULT_RETRY_INTERVAL_MS,
        metavar="MS",
        help="Pause after an unrelated completion, in milliseconds.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for diagnostics written to stderr.",
    )


def _build_shell(args: argparse.Namespace) -> BShell:
    strategy = WaitStrategy.DISCARD if args.discard_unmatched else WaitStrategy.PENDING
    config = ShellConfig(retry_interval_ms=args.retry_interval, wait_strategy=strategy)
    return BShell(ProcessBackend(), config=config)


def _run_exec(args: argparse.Namespace) -> int:
    shell = _build_shell(args)
    try:
        result = shell.execute(args.line)
    finally:
        shell.close()
    if result is None:
        return 0 if shell.state.terminated else 1
    return 0 if result.ok else 1


def _run_shell(args: argparse.Namespace) -> int:
    shell = _build_shell(args)
    return shell.run()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="bshell")
    subparsers = parser.add_subparsers(dest="command_name", required=True)

    exec_parser = subparsers.add_parser("exec", help="Run a single command line")
    _add_common_flags(exec_parser)
    exec_parser.add_argument("line", help="Command line to execute")
    exec_parser.set_defaults(func=_run_exec)

    shell_parser = subparsers.add_parser("shell", help="Start an interactive shell")
    _add_common_flags(shell_parser)
    shell_parser.set_defaults(func=_run_shell)

    args = parser.parse_args(argv)
    if args.retry_interval < 0:
        parser.error("--retry-interval must be non-negative")
    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        parser.error(str(exc))
    exit_code = args.func(args)
    raise SystemExit(exit_code)


__all__ = ["main"]
