"""CLI runner orchestration.

This module handles command dispatch and execution for the ops-tools CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from importlib.metadata import version, PackageNotFoundError

from opstools.cli.arguments import build_parser
from opstools.cli.commands.git_scan import GitScanCommand
from opstools.cli.commands.status import StatusCommand
from opstools.cli.commands.tools import ToolsCommand
from opstools.cli.commands.validate import ValidateCommand
from opstools.cli.config_bridge import ConfigBridge
from opstools.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_SCANNER_ERROR,
    EXIT_SUCCESS,
)
from opstools.config import get_default_config, load_config
from opstools.core.errors import ConfigError
from opstools.core.logging import configure_logging, get_logger
from opstools.scanning.snapshot import find_git_root

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get ops-tools version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("ops-tools")
    except PackageNotFoundError:
        # Fallback for source checkouts without installed metadata.
        from opstools import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self) -> None:
        """Initialize CLIRunner with parser and commands."""
        self.parser = build_parser()
        self._version = get_version()
        self.git_scan_cmd = GitScanCommand(version=self._version)
        self.status_cmd = StatusCommand(version=self._version)
        self.tools_cmd = ToolsCommand()
        self.validate_cmd = ValidateCommand()

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        # Handle --help specially to return 0
        if argv is not None:
            argv_list = list(argv)
            if "--help" in argv_list or "-h" in argv_list:
                self.parser.print_help()
                return EXIT_SUCCESS
        else:
            argv_list = None

        args = self.parser.parse_args(argv_list)

        # Configure logging as early as possible
        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)

        if command == "git-scan":
            return self._handle_git_scan(args)
        elif command == "status":
            return self._handle_status(args)
        elif command == "tools":
            return self.tools_cmd.execute(args)
        elif command == "validate":
            return self.validate_cmd.execute(args)
        else:
            # No command specified - show help
            self.parser.print_help()
            return EXIT_SUCCESS

    def _handle_git_scan(self, args) -> int:
        """Handle the git-scan command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code.
        """
        start_dir = Path(args.path).resolve()
        if not start_dir.is_dir():
            LOGGER.error(f"Not an existing directory: {start_dir}")
            return EXIT_INVALID_USAGE
        project_root = find_git_root(start_dir) or start_dir

        try:
            config = load_config(
                project_root=project_root,
                cli_config_path=getattr(args, "config", None),
                cli_overrides=ConfigBridge.args_to_overrides(args),
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        try:
            return self.git_scan_cmd.execute(args, config)
        except Exception as e:
            if args.debug:
                import traceback
                traceback.print_exc()
            LOGGER.error(f"Scan failed: {e}")
            return EXIT_SCANNER_ERROR

    def _handle_status(self, args) -> int:
        """Handle the status command.

        An unreadable configuration is reported but does not stop the
        status output.
        """
        try:
            config = load_config(
                project_root=Path.cwd(),
                cli_config_path=getattr(args, "config", None),
            )
        except ConfigError as e:
            LOGGER.warning(f"Ignoring configuration: {e}")
            config = get_default_config()
        return self.status_cmd.execute(args, config)
