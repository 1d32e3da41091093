"""Installing scanning tools through a layered fallback chain.

Cheapest first: an existing binary on PATH or in a known bin directory,
then each of the tool's package-manager strategies in catalog order, then
a binary from the tool's latest GitHub release.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from opstools.bootstrap.paths import find_command
from opstools.bootstrap.platform import Platform, detect_platform
from opstools.core.errors import CommandError, first_line
from opstools.core.logging import get_logger
from opstools.core.subprocess_runner import run_captured
from opstools.scanning.catalog import InstallStrategy, ScanTool
from opstools.scanning.releases import ReleaseAssetResolver, ReleaseInstallStatus
from opstools.scanning.resolver import ToolResolver

LOGGER = get_logger(__name__)

# Wrapper used for strategies that need elevated privileges
ELEVATION_COMMAND = "sudo"

NO_INSTALL_METHOD = "no installation method available"


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


class InstallState(str, Enum):
    """Outcome kind of :meth:`Installer.ensure_installed`."""

    ALREADY_INSTALLED = "already_installed"
    INSTALLED = "installed"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallStatus:
    """Outcome of ensuring a tool is installed.

    Attributes:
        state: What happened.
        path: Binary path when the tool is available.
        errors: Human-readable reasons when installation failed.
    """

    state: InstallState
    path: Optional[Path] = None
    errors: List[str] = field(default_factory=list)

    @classmethod
    def already_installed(cls, path: Path) -> "InstallStatus":
        return cls(InstallState.ALREADY_INSTALLED, path=path)

    @classmethod
    def installed(cls, path: Path) -> "InstallStatus":
        return cls(InstallState.INSTALLED, path=path)

    @classmethod
    def failed(cls, errors: List[str]) -> "InstallStatus":
        return cls(InstallState.FAILED, errors=list(errors))

    @property
    def ok(self) -> bool:
        return self.state is not InstallState.FAILED


class Installer:
    """Resolves a tool, installing it when it is missing."""

    def __init__(
        self,
        resolver: Optional[ToolResolver] = None,
        releases: Optional[ReleaseAssetResolver] = None,
        platform_detector: Callable[[], Optional[Platform]] = detect_platform,
        release_fallback: bool = True,
    ):
        """Initialize Installer.

        Args:
            resolver: Finds installed binaries.
            releases: GitHub release installer used as the last resort.
            platform_detector: Returns the host Platform (None if unsupported).
            release_fallback: Whether GitHub release installs are allowed.
        """
        self._resolver = resolver or ToolResolver()
        self._releases = releases or ReleaseAssetResolver()
        self._platform_detector = platform_detector
        self._release_fallback = release_fallback

    @property
    def resolver(self) -> ToolResolver:
        return self._resolver

    def ensure_installed(self, tool: ScanTool) -> InstallStatus:
        """Make sure ``tool`` is installed.

        Returns:
            ALREADY_INSTALLED or INSTALLED with the binary path, or FAILED with
            the reasons collected from every attempted method.
        """
        path = self._resolver.resolve(tool)
        if path is not None:
            return InstallStatus.already_installed(path)

        errors: List[str] = []
        attempted = False

        for strategy in tool.install_strategies:
            command = self._strategy_command(strategy)
            if command is None:
                continue

            attempted = True
            LOGGER.info(f"Installing {tool.display_name} via {strategy.label}")
            try:
                self._run_strategy(command)
            except CommandError as e:
                errors.append(f"{strategy.label} failed: {e.message}")
                continue

            path = self._resolver.resolve(tool)
            if path is not None:
                return InstallStatus.installed(path)
            errors.append(f"{strategy.label} finished but {tool.binary_name} was not found")

        path = self._resolver.resolve(tool)
        if path is not None:
            return InstallStatus.installed(path)

        if tool.release_repo and self._release_fallback:
            attempted = True
            outcome = self._releases.install_latest(
                tool.release_repo, tool.binary_name, self._platform_detector()
            )
            if outcome.status is ReleaseInstallStatus.INSTALLED and outcome.path is not None:
                return InstallStatus.installed(outcome.path)
            if outcome.reason:
                errors.append(outcome.reason)

        if not attempted and not errors:
            errors.append(NO_INSTALL_METHOD)

        return InstallStatus.failed(errors)

    def _strategy_command(self, strategy: InstallStrategy) -> Optional[List[str]]:
        """Build the command for a strategy, or None if it must be skipped.

        A strategy is skipped when its package manager is not installed, or
        when it needs elevation, the process is not root and no elevation
        wrapper exists.
        """
        if find_command(strategy.program) is None:
            LOGGER.debug(f"Skipping {strategy.label}: {strategy.program} not found")
            return None

        if not strategy.use_sudo or _is_root():
            return strategy.command()

        if find_command(ELEVATION_COMMAND) is None:
            LOGGER.debug(f"Skipping {strategy.label}: requires {ELEVATION_COMMAND}")
            return None
        return strategy.command(elevate_with=ELEVATION_COMMAND)

    def _run_strategy(self, command: List[str]) -> None:
        try:
            result = run_captured(command)
        except OSError as e:
            raise CommandError(command[0], f"unable to execute: {e}") from e
        if result.returncode != 0:
            raise CommandError(" ".join(command), first_line(result.stderr))
