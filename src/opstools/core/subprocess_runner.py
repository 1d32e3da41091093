"""Subprocess helpers for running external tools.

Output is captured fully rather than streamed so that the orchestrator can
print each tool's stdout and stderr as one block.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from opstools.core.errors import CommandError, first_line
from opstools.core.logging import get_logger

LOGGER = get_logger(__name__)


def run_captured(
    cmd: Sequence[str],
    cwd: Optional[Union[str, Path]] = None,
    input_text: Optional[str] = None,
    timeout: Optional[float] = None,
) -> subprocess.CompletedProcess:
    """Run a command to completion, capturing stdout and stderr as text.

    There is no timeout unless one is passed explicitly; a hung tool blocks
    the caller.

    Args:
        cmd: Command and arguments to run.
        cwd: Working directory for the command.
        input_text: Text fed to the process's stdin.
        timeout: Optional timeout in seconds.

    Returns:
        CompletedProcess with stdout/stderr captured.

    Raises:
        OSError: If the program cannot be spawned.
        subprocess.TimeoutExpired: If a timeout was given and exceeded.
    """
    LOGGER.debug(f"Running: {' '.join(str(part) for part in cmd)}")
    return subprocess.run(
        [str(part) for part in cmd],
        input=input_text,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        cwd=str(cwd) if cwd is not None else None,
        timeout=timeout,
    )


def run_bytes(
    cmd: Sequence[str],
    cwd: Optional[Union[str, Path]] = None,
    input_bytes: Optional[bytes] = None,
) -> subprocess.CompletedProcess:
    """Run a command capturing raw bytes (for NUL-delimited git output)."""
    LOGGER.debug(f"Running: {' '.join(str(part) for part in cmd)}")
    return subprocess.run(
        [str(part) for part in cmd],
        input=input_bytes,
        capture_output=True,
        cwd=str(cwd) if cwd is not None else None,
    )


def run_checked(
    cmd: List[str],
    cwd: Optional[Union[str, Path]] = None,
    label: Optional[str] = None,
) -> str:
    """Run a command and return its stdout, raising CommandError on failure.

    Args:
        cmd: Command and arguments to run.
        cwd: Working directory for the command.
        label: Name used in error messages (defaults to the program name).

    Returns:
        Captured stdout.

    Raises:
        CommandError: If the program cannot be spawned or exits non-zero.
    """
    name = label or str(cmd[0])
    try:
        result = run_captured(cmd, cwd=cwd)
    except OSError as e:
        raise CommandError(name, f"unable to execute: {e}") from e

    if result.returncode != 0:
        raise CommandError(name, first_line(result.stderr))
    return result.stdout
