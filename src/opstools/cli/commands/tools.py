"""Tools command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from opstools.config.models import OpsToolsConfig

from opstools.cli.commands import Command
from opstools.cli.exit_codes import EXIT_SUCCESS
from opstools.scanning.catalog import all_tools


class ToolsCommand(Command):
    """Lists the catalog of scanning tools."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "tools"

    def execute(self, args: Namespace, config: "OpsToolsConfig | None" = None) -> int:
        """List every tool with its scan targets and install methods.

        Returns:
            Exit code (always 0).
        """
        for tool in all_tools():
            print(f"{tool.display_name} ({tool.name})")
            print(f"  Binary: {tool.binary_name}")
            scopes = ", ".join(template.scope.label for template in tool.commands)
            print(f"  Scans: {scopes}")
            strategies = " -> ".join(strategy.label for strategy in tool.install_strategies)
            print(f"  Install: {strategies or 'none'}")
            print(f"  GitHub releases: {tool.release_repo or 'none'}")
            print()
        return EXIT_SUCCESS
