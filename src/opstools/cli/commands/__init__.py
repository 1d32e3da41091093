"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from opstools.config.models import OpsToolsConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace, config: "OpsToolsConfig | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Optional ops-tools configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from opstools.cli.commands.git_scan import GitScanCommand
from opstools.cli.commands.status import StatusCommand
from opstools.cli.commands.tools import ToolsCommand
from opstools.cli.commands.validate import ValidateCommand

__all__ = [
    "Command",
    "GitScanCommand",
    "StatusCommand",
    "ToolsCommand",
    "ValidateCommand",
]
