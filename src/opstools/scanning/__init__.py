"""
Git secret and vulnerability scanning.

This package handles:
- The catalog of supported scanning tools
- Locating and installing their binaries
- Gitignore-respecting worktree snapshots
- Running scans and classifying outcomes
"""

from opstools.scanning.catalog import CATALOG, ScanTool, all_tools, get_tool, select_tools
from opstools.scanning.executor import ScanOutcome, ScanStatus, classify_exit_code, run_scans
from opstools.scanning.installer import Installer, InstallState, InstallStatus
from opstools.scanning.orchestrator import GitScanOrchestrator, ScanSummary
from opstools.scanning.snapshot import WorktreeSnapshot, WorktreeSnapshotBuilder

__all__ = [
    "CATALOG",
    "ScanTool",
    "all_tools",
    "get_tool",
    "select_tools",
    "ScanOutcome",
    "ScanStatus",
    "classify_exit_code",
    "run_scans",
    "Installer",
    "InstallState",
    "InstallStatus",
    "GitScanOrchestrator",
    "ScanSummary",
    "WorktreeSnapshot",
    "WorktreeSnapshotBuilder",
]
