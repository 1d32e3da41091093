"""Running a tool's scan commands and classifying their outcomes.

Every catalog command is invoked with flags that map the tool's result
onto one exit-code convention, so classification never looks at output:

- 0: clean
- 1: findings
- anything else, or a process that could not be spawned: error
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from opstools.core.errors import CommandError
from opstools.core.logging import get_logger
from opstools.core.subprocess_runner import run_captured
from opstools.scanning.catalog import ScanTool
from opstools.scanning.resolver import ToolResolver

LOGGER = get_logger(__name__)

TOOL_NOT_FOUND = "tool not found"


class ScanStatus(str, Enum):
    """Normalized result of one scan command."""

    CLEAN = "clean"
    FINDINGS = "findings"
    ERROR = "error"


def classify_exit_code(code: Optional[int]) -> ScanStatus:
    """Map a process exit code (None if it never ran) to a ScanStatus."""
    if code == 0:
        return ScanStatus.CLEAN
    if code == 1:
        return ScanStatus.FINDINGS
    return ScanStatus.ERROR


@dataclass(frozen=True)
class ScanOutcome:
    """Observation record for one executed scan command.

    Attributes:
        label: Command label, e.g. "Gitleaks (git history)".
        status: Classified result.
        exit_code: Process exit code, or None when it could not be spawned.
        stdout: Captured standard output.
        stderr: Captured standard error (or the spawn error).
    """

    label: str
    status: ScanStatus
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""

    @property
    def is_clean(self) -> bool:
        return self.status is ScanStatus.CLEAN


def run_scans(
    tool: ScanTool,
    repo_root: Path,
    snapshot_root: Path,
    resolver: Optional[ToolResolver] = None,
) -> List[ScanOutcome]:
    """Run every scan command of ``tool`` in catalog order.

    The binary is resolved again before each command, so a tool removed
    after installation is reported instead of silently skipped.

    Args:
        tool: Catalog tool to run.
        repo_root: Real repository root, scanned for history.
        snapshot_root: Worktree snapshot root.
        resolver: Binary resolver (default: a fresh ToolResolver).

    Returns:
        One ScanOutcome per command.

    Raises:
        CommandError: If the tool's binary can no longer be found.
    """
    resolver = resolver or ToolResolver()
    outcomes: List[ScanOutcome] = []

    for command in tool.scan_commands(repo_root, snapshot_root):
        binary = resolver.resolve(tool)
        if binary is None:
            raise CommandError(tool.binary_name, TOOL_NOT_FOUND)

        LOGGER.info(f"Running {command.label}")
        try:
            result = run_captured([str(binary), *command.args], cwd=command.workdir)
        except OSError as e:
            LOGGER.warning(f"{command.label} could not be started: {e}")
            outcomes.append(
                ScanOutcome(label=command.label, status=ScanStatus.ERROR, stderr=str(e))
            )
            continue

        status = classify_exit_code(result.returncode)
        LOGGER.debug(f"{command.label} exited with {result.returncode} ({status.value})")
        outcomes.append(
            ScanOutcome(
                label=command.label,
                status=status,
                exit_code=result.returncode,
                stdout=result.stdout or "",
                stderr=result.stderr or "",
            )
        )

    return outcomes
