from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

from honkit_tester.errors import ProcessError
from honkit_tester.process import run_command


def _messages(caplog: pytest.LogCaptureFixture, level: int) -> list[str]:
    return [record.getMessage() for record in caplog.records if record.levelno == level]


def test_stdout_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="honkit_tester")

    assert run_command(sys.executable, ["-c", "print('hello from child')"]) == 0

    assert "hello from child" in _messages(caplog, logging.DEBUG)
    assert "Run command finished" in _messages(caplog, logging.DEBUG)


def test_stderr_is_logged_at_warning(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="honkit_tester")

    run_command(sys.executable, ["-c", "import sys; sys.stderr.write('careful\\n')"])

    assert _messages(caplog, logging.WARNING) == ["careful"]


def test_nonzero_exit_raises_with_status() -> None:
    with pytest.raises(ProcessError, match="the exit code is: 3") as excinfo:
        run_command(sys.executable, ["-c", "import sys; sys.exit(3)"])

    assert excinfo.value.returncode == 3
    assert excinfo.value.command == sys.executable


def test_missing_executable_raises() -> None:
    with pytest.raises(ProcessError, match="failed") as excinfo:
        run_command("honkit-tester-no-such-binary", [])

    assert excinfo.value.returncode is None


def test_command_runs_in_requested_directory(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG, logger="honkit_tester")

    run_command(sys.executable, ["-c", "import os; print(os.getcwd())"], cwd=tmp_path)

    logged = [Path(message).resolve() for message in _messages(caplog, logging.DEBUG)[1:2]]
    assert logged == [tmp_path.resolve()]


def test_large_output_on_both_streams_does_not_block() -> None:
    script = (
        "import sys\n"
        "for i in range(20000):\n"
        "    sys.stdout.write(f'out {i}\\n')\n"
        "    sys.stderr.write(f'err {i}\\n')\n"
    )

    assert run_command(sys.executable, ["-c", script]) == 0
