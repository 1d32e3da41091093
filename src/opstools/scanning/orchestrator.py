"""Git secret scanning driver.

Single sequential pass over the catalog:

1. locate the repository and build its worktree snapshot
2. show each tool's install state and ask once before installing
3. install missing tools, skipping any that stay unavailable
4. run every available tool, printing its raw output
5. print the aggregate summary

The snapshot is released on every exit path, including cancellation and
errors raised mid-scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from opstools.bootstrap.paths import find_command
from opstools.config.models import OpsToolsConfig
from opstools.core.console import Console
from opstools.core.errors import (
    CancelledError,
    CommandError,
    ConfigError,
    InvalidPathError,
    NotARepositoryError,
    OperationError,
)
from opstools.core.logging import get_logger
from opstools.core.prompts import Prompts
from opstools.scanning.catalog import ScanTool, select_tools
from opstools.scanning.executor import ScanOutcome, ScanStatus, run_scans
from opstools.scanning.installer import InstallState, Installer
from opstools.scanning.releases import ReleaseAssetResolver
from opstools.scanning.resolver import ToolResolver, install_dirs_for
from opstools.scanning.snapshot import WorktreeSnapshot, WorktreeSnapshotBuilder, find_git_root

LOGGER = get_logger(__name__)

CONFIRM_INSTALL = "Install missing tools and start the scan?"
NO_OUTPUT = "(no output)"
FINDINGS_WARNING = (
    "Potential secrets or vulnerabilities were reported. "
    "Review the tool output above before pushing."
)


@dataclass
class ScanSummary:
    """Aggregate result of a git scan run.

    ``failed`` counts every scan that did not come back clean: findings,
    errors and tools whose run could not complete.
    """

    clean: int = 0
    failed: int = 0
    findings: int = 0
    skipped_tools: List[str] = field(default_factory=list)
    outcomes: List[ScanOutcome] = field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        return self.findings > 0

    @property
    def all_clean(self) -> bool:
        return self.failed == 0


def format_exit_code(exit_code: Optional[int]) -> str:
    if exit_code is None:
        return "exit code unknown"
    return f"exit code {exit_code}"


def ensure_trailing_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


class GitScanOrchestrator:
    """Runs every selected catalog tool against a repository."""

    def __init__(
        self,
        config: Optional[OpsToolsConfig] = None,
        console: Optional[Console] = None,
        prompts: Optional[Prompts] = None,
        installer: Optional[Installer] = None,
        snapshot_builder: Optional[WorktreeSnapshotBuilder] = None,
    ):
        """Initialize GitScanOrchestrator.

        Args:
            config: Loaded configuration (default: built-in defaults).
            console: Output printer.
            prompts: Confirmation prompts; ``scanner.auto_install`` skips them.
            installer: Tool installer (default: built from ``config``).
            snapshot_builder: Worktree snapshot builder.
        """
        self._config = config or OpsToolsConfig()
        self._console = console or Console()
        self._prompts = prompts or Prompts(assume_yes=self._config.scanner.auto_install)
        self._installer = installer or build_installer(self._config)
        self._snapshot_builder = snapshot_builder or WorktreeSnapshotBuilder(
            warn=self._console.warning
        )

    @property
    def resolver(self) -> ToolResolver:
        return self._installer.resolver

    def selected_tools(self) -> List[ScanTool]:
        """Tools to run, in catalog order.

        Raises:
            ConfigError: If the configuration names an unknown tool.
        """
        try:
            return select_tools(self._config.selected_tools())
        except KeyError as e:
            raise ConfigError("scanner.tools", str(e.args[0])) from e

    def run(self, start_dir: Optional[Path] = None) -> ScanSummary:
        """Scan the repository containing ``start_dir`` (default: cwd).

        Returns:
            The aggregate ScanSummary.

        Raises:
            InvalidPathError: If ``start_dir`` is not an existing directory.
            NotARepositoryError: If ``start_dir`` is not inside a git repository.
            CommandError: If git is unavailable or the snapshot cannot be built.
            IoError: If the snapshot cannot be written.
            ConfigError: If the configured tool list is invalid.
            CancelledError: If the user declines the install prompt.
        """
        start_dir = (start_dir or Path.cwd()).resolve()
        if not start_dir.is_dir():
            raise InvalidPathError(start_dir)
        tools = self.selected_tools()

        self._console.header("Git secret scan")

        repo_root = find_git_root(start_dir)
        if repo_root is None:
            raise NotARepositoryError(start_dir)

        if find_command("git") is None:
            raise CommandError("git", "git is not installed or not on PATH")

        self._console.info(f"Scanning repository: {repo_root}")
        self._console.info(
            "Strict mode: history is scanned in place, the worktree through "
            "a snapshot of tracked, non-ignored files"
        )
        self._console.blank_line()

        with self._snapshot_builder.build(repo_root) as snapshot:
            self._confirm_install(tools)
            self._install_missing(tools)
            summary = self._scan_all(tools, repo_root, snapshot)

        self._console.show_summary("Scan summary", summary.clean, summary.failed)
        if summary.has_findings:
            self._console.warning(FINDINGS_WARNING)
        return summary

    def _confirm_install(self, tools: List[ScanTool]) -> None:
        self._console.info("The following tools will be used:")
        for tool in tools:
            state = "installed" if self.resolver.resolve(tool) is not None else "missing"
            self._console.list_item("🔎", f"{tool.display_name} ({state})")

        if not self._prompts.confirm(CONFIRM_INSTALL, default=True):
            self._console.warning("Scan cancelled")
            raise CancelledError("Scan cancelled by user")
        self._console.blank_line()

    def _install_missing(self, tools: List[ScanTool]) -> None:
        attempted = 0
        succeeded = 0
        failed = 0

        for tool in tools:
            if self.resolver.resolve(tool) is not None:
                self._console.success_item(f"{tool.display_name} installed")
                continue

            self._console.info(f"Installing {tool.display_name}...")
            attempted += 1
            try:
                status = self._installer.ensure_installed(tool)
            except OperationError as e:
                self._console.error_item(f"Failed to install {tool.display_name}", str(e))
                failed += 1
                continue

            if status.ok:
                verb = "already installed" if status.state is InstallState.ALREADY_INSTALLED else "installed"
                self._console.success_item(f"{tool.display_name} {verb} at {status.path}")
                succeeded += 1
            else:
                self._console.error_item(
                    f"Failed to install {tool.display_name}", "; ".join(status.errors)
                )
                failed += 1

        if attempted > 0:
            self._console.show_summary("Install summary", succeeded, failed)
            self._console.blank_line()

    def _scan_all(
        self, tools: List[ScanTool], repo_root: Path, snapshot: WorktreeSnapshot
    ) -> ScanSummary:
        summary = ScanSummary()

        for tool in tools:
            if self.resolver.resolve(tool) is None:
                self._console.warning(f"Skipping {tool.display_name}: not installed")
                LOGGER.warning(f"Skipping {tool.name}: binary not found")
                summary.skipped_tools.append(tool.name)
                continue

            self._console.info(f"Running {tool.display_name}...")
            try:
                outcomes = run_scans(tool, repo_root, snapshot.root, self.resolver)
            except OperationError as e:
                self._console.error_item(f"{tool.display_name} scan failed", str(e))
                summary.failed += 1
                self._console.blank_line()
                continue

            for outcome in outcomes:
                self._report_outcome(outcome)
                summary.outcomes.append(outcome)
                if outcome.is_clean:
                    summary.clean += 1
                else:
                    summary.failed += 1
                    if outcome.status is ScanStatus.FINDINGS:
                        summary.findings += 1

            self._console.blank_line()

        return summary

    def _report_outcome(self, outcome: ScanOutcome) -> None:
        self._console.separator()
        self._print_stream(f"{outcome.label} stdout", outcome.stdout)
        self._print_stream(f"{outcome.label} stderr", outcome.stderr)

        if outcome.status is ScanStatus.CLEAN:
            self._console.success_item(f"{outcome.label} passed")
        elif outcome.status is ScanStatus.FINDINGS:
            self._console.error_item(
                f"{outcome.label} reported findings", format_exit_code(outcome.exit_code)
            )
        else:
            self._console.error_item(
                f"{outcome.label} failed", format_exit_code(outcome.exit_code)
            )

    def _print_stream(self, title: str, text: str) -> None:
        self._console.info(title)
        if not text.strip():
            self._console.raw(NO_OUTPUT + "\n")
        else:
            self._console.raw(ensure_trailing_newline(text))


def build_installer(config: OpsToolsConfig, resolver: Optional[ToolResolver] = None) -> Installer:
    """Create an Installer wired to the configured GitHub and install settings."""
    releases = ReleaseAssetResolver(
        github=config.github,
        install_dir=config.scanner.install_dir,
    )
    return Installer(
        resolver=resolver or ToolResolver(install_dirs=install_dirs_for(config.scanner.install_dir)),
        releases=releases,
        release_fallback=config.scanner.release_fallback,
    )

