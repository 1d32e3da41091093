"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from opstools.config.models import OpsToolsConfig

from opstools.bootstrap.paths import OpsToolsPaths, install_dir_candidates, select_install_dir
from opstools.bootstrap.platform import detect_platform
from opstools.cli.commands import Command
from opstools.cli.exit_codes import EXIT_SUCCESS
from opstools.scanning.catalog import all_tools
from opstools.scanning.resolver import ToolResolver, install_dirs_for


class StatusCommand(Command):
    """Shows platform information, install directories and tool status."""

    def __init__(self, version: str, resolver: Optional[ToolResolver] = None):
        """Initialize StatusCommand.

        Args:
            version: Current ops-tools version string.
            resolver: Tool resolver (default: PATH, install dirs, local bin, Go bin).
        """
        self._version = version
        self._resolver = resolver

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "OpsToolsConfig | None" = None) -> int:
        """Execute the status command.

        Args:
            args: Parsed command-line arguments.
            config: Optional configuration (for the install directory override).

        Returns:
            Exit code (always 0 for status).
        """
        override = config.scanner.install_dir if config is not None else None
        paths = OpsToolsPaths.default()
        platform = detect_platform()

        print(f"ops-tools version: {self._version}")
        if platform is None:
            print("Platform: unsupported (GitHub release installs disabled)")
        else:
            print(f"Platform: {platform.name}")
            print(f"  OS tokens: {', '.join(platform.os_tokens)}")
            print(f"  Arch tokens: {', '.join(platform.arch_tokens)}")
        print(f"Config directory: {paths.config_dir}")
        print(f"Install directory: {select_install_dir(override)}")
        candidates = ", ".join(str(path) for path in install_dir_candidates(override))
        print(f"  Candidates: {candidates}")
        if config is not None and config.sources:
            print(f"Config sources: {', '.join(config.sources)}")
        print()

        resolver = self._resolver or ToolResolver(install_dirs=install_dirs_for(override))
        print("Scanning tools:")
        for tool in all_tools():
            path = resolver.resolve(tool)
            state = str(path) if path is not None else "missing"
            print(f"  {tool.display_name}: {state}")

        return EXIT_SUCCESS
