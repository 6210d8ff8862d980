import io
import shlex
import sys

import pytest

from bshell import BShell, LoopState, ShellConfig, WaitStrategy
from bshell.backends import ProcessBackend
from bshell.console import Console

from conftest import FakeBackend, make_console


def test_prompt_shows_line_number(backend):
    console = make_console()
    shell = BShell(backend, console=console)
    shell.prompt()
    assert console.stdout.getvalue() == "b-shell[1]% "


def test_exit_terminates_without_spawning(backend):
    console = make_console("exit\n")
    shell = BShell(backend, console=console)

    assert shell.run() == 0

    assert shell.state.loop_state is LoopState.TERMINATED
    assert shell.state.line_number == 1
    assert backend.events == []
    assert backend.closed == 1
    assert console.stdout.getvalue() == "b-shell[1]% Exit called...terminating\n"


def test_session_counts_lines_and_prompts(backend):
    console = make_console("a ; b\n\nc & d\nexit\n")
    shell = BShell(backend, console=console)

    shell.run()

    out = console.stdout.getvalue()
    assert out.startswith("b-shell[1]% b-shell[2]% b-shell[2]% b-shell[3]% ")
    assert shell.state.line_number == 3
    assert backend.spawned() == [("a",), ("b",), ("c",), ("d",)]


def test_replaying_same_line_increments_each_time(backend):
    shell = BShell(backend, console=make_console())
    numbers = []
    for _ in range(3):
        shell.execute("echo hi")
        numbers.append(shell.state.line_number)
    assert numbers == [2, 3, 4]


def test_invalid_group_reported_but_shell_keeps_running(backend):
    console = make_console("a ; ; b\nexit\n")
    shell = BShell(backend, console=console)

    shell.run()

    assert "ERROR: empty command before ';'" in console.stderr.getvalue()
    assert backend.spawned() == [("a",), ("b",)]
    assert shell.state.line_number == 2


def test_end_of_input_terminates_once(backend):
    console = make_console("a\n")
    shell = BShell(backend, console=console)

    shell.run()
    shell.close()

    assert shell.state.terminated
    assert backend.closed == 1
    assert console.stdout.getvalue().endswith("Exit called...terminating\n")


class FlakyInput(io.StringIO):
    def __init__(self, lines):
        super().__init__()
        self._lines = list(lines)

    def readline(self, *args):
        item = self._lines.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def test_read_failure_reprompts_without_increment(backend):
    console = Console(
        stdin=FlakyInput([OSError("device gone"), "a\n", "exit\n"]),
        stdout=io.StringIO(),
        stderr=io.StringIO(),
    )
    shell = BShell(backend, console=console)

    shell.run()

    assert "ERROR: read input: device gone" in console.stderr.getvalue()
    assert console.stdout.getvalue().count("b-shell[1]% ") == 2
    assert shell.state.line_number == 2


def test_untokenizable_line_is_skipped(backend):
    console = make_console('echo "open\nexit\n')
    shell = BShell(backend, console=console)

    shell.run()

    assert "cannot tokenize" in console.stderr.getvalue()
    assert backend.events == []
    assert shell.state.line_number == 1


def test_background_completions_drained_each_cycle(backend):
    shell = BShell(backend, console=make_console("bg & fg\nexit\n"))

    shell.step()
    assert shell.synchronizer.pending() == [1]
    shell.step()
    assert shell.synchronizer.pending() == []


def test_config_controls_strategy_and_interval(backend):
    config = ShellConfig(retry_interval_ms=25, wait_strategy=WaitStrategy.DISCARD)
    shell = BShell(backend, console=make_console(), config=config)

    shell.execute("bg & fg")

    assert ("sleep", 25) in backend.events
    assert shell.synchronizer.discarded == 1


def test_custom_teardown_called_once(backend):
    calls = []
    shell = BShell(backend, console=make_console("exit\n"), teardown=lambda: calls.append(1))
    shell.run()
    shell.close()
    assert calls == [1]
    assert backend.closed == 0


def test_null_byte_token_reported_and_session_continues():
    calls = []
    console = Console(
        stdin=io.StringIO(f"bad\x00token ; {shlex.join([sys.executable, '-c', 'pass'])}\nexit\n"),
        stdout=io.StringIO(),
        stderr=io.StringIO(),
    )
    shell = BShell(ProcessBackend(), console=console, teardown=lambda: calls.append(1))

    assert shell.run() == 0

    assert "null byte" in console.stderr.getvalue()
    assert shell.state.line_number == 2
    assert shell.state.terminated
    assert calls == [1]


class ExplodingBackend(FakeBackend):
    def spawn(self, argv):
        raise RuntimeError("backend crashed")


def test_teardown_runs_when_loop_raises():
    backend = ExplodingBackend()
    shell = BShell(backend, console=make_console("a\nexit\n"))

    with pytest.raises(RuntimeError):
        shell.run()

    assert backend.closed == 1
