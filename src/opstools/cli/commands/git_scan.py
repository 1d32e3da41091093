"""Git scan command implementation."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from opstools.config.models import OpsToolsConfig

from opstools.cli.commands import Command
from opstools.cli.exit_codes import (
    EXIT_CANCELLED,
    EXIT_INVALID_USAGE,
    EXIT_ISSUES_FOUND,
    EXIT_SCANNER_ERROR,
    EXIT_SUCCESS,
)
from opstools.config.models import OpsToolsConfig
from opstools.core.console import Console
from opstools.core.errors import (
    CancelledError,
    ConfigError,
    InvalidPathError,
    NotARepositoryError,
    OperationError,
)
from opstools.core.logging import get_logger
from opstools.core.prompts import Prompts
from opstools.scanning.orchestrator import GitScanOrchestrator

LOGGER = get_logger(__name__)

OrchestratorFactory = Callable[..., GitScanOrchestrator]


class GitScanCommand(Command):
    """Scans a git repository with every available scanning tool."""

    def __init__(
        self,
        version: str,
        console: Optional[Console] = None,
        orchestrator_factory: OrchestratorFactory = GitScanOrchestrator,
    ):
        """Initialize GitScanCommand.

        Args:
            version: Current ops-tools version string.
            console: Output printer (default: stdout).
            orchestrator_factory: Builds the orchestrator for a run.
        """
        self._version = version
        self._console = console or Console()
        self._orchestrator_factory = orchestrator_factory

    @property
    def name(self) -> str:
        """Command identifier."""
        return "git-scan"

    def execute(self, args: Namespace, config: "OpsToolsConfig | None" = None) -> int:
        """Execute the git-scan command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded ops-tools configuration.

        Returns:
            0 when every scan was clean, 1 on findings or scan errors,
            2 on fatal errors, 3 on invalid usage, 4 when cancelled.
        """
        config = config or OpsToolsConfig()
        assume_yes = bool(getattr(args, "yes", False)) or config.scanner.auto_install

        orchestrator = self._orchestrator_factory(
            config=config,
            console=self._console,
            prompts=Prompts(assume_yes=assume_yes),
        )

        try:
            summary = orchestrator.run(Path(getattr(args, "path", ".")))
        except CancelledError as e:
            LOGGER.info(str(e))
            return EXIT_CANCELLED
        except (InvalidPathError, NotARepositoryError, ConfigError) as e:
            self._console.error(str(e))
            return EXIT_INVALID_USAGE
        except OperationError as e:
            self._console.error(str(e))
            return EXIT_SCANNER_ERROR

        return EXIT_SUCCESS if summary.all_clean else EXIT_ISSUES_FOUND
