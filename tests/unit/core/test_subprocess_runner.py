"""Tests for subprocess helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from opstools.core.errors import CommandError
from opstools.core.subprocess_runner import run_bytes, run_captured, run_checked

PYTHON = sys.executable


class TestRunCaptured:
    """Tests for run_captured."""

    def test_captures_stdout_and_stderr(self) -> None:
        result = run_captured(
            [PYTHON, "-c", "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"]
        )
        assert result.returncode == 3
        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"

    def test_runs_in_cwd(self, tmp_path: Path) -> None:
        result = run_captured([PYTHON, "-c", "import os; print(os.getcwd())"], cwd=tmp_path)
        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    def test_missing_program_raises_oserror(self) -> None:
        with pytest.raises(OSError):
            run_captured(["definitely-not-a-real-program-xyz"])


def test_run_bytes_passes_stdin() -> None:
    result = run_bytes(
        [PYTHON, "-c", "import sys; sys.stdout.buffer.write(sys.stdin.buffer.read()[::-1])"],
        input_bytes=b"a\0b",
    )
    assert result.stdout == b"b\0a"


class TestRunChecked:
    """Tests for run_checked."""

    def test_returns_stdout(self) -> None:
        assert run_checked([PYTHON, "-c", "print('ok')"]).strip() == "ok"

    def test_nonzero_exit_raises_with_first_stderr_line(self) -> None:
        with pytest.raises(CommandError) as exc_info:
            run_checked(
                [PYTHON, "-c", "import sys; sys.stderr.write('boom\\nsecond\\n'); sys.exit(2)"],
                label="probe",
            )
        assert exc_info.value.command == "probe"
        assert exc_info.value.message == "boom"

    def test_spawn_failure_raises_command_error(self) -> None:
        with pytest.raises(CommandError, match="unable to execute"):
            run_checked(["definitely-not-a-real-program-xyz"])
