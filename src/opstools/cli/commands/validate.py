"""Validate command implementation."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from opstools.config.models import OpsToolsConfig

from opstools.cli.commands import Command
from opstools.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_ISSUES_FOUND, EXIT_SUCCESS
from opstools.config.loader import PROJECT_CONFIG_NAMES, find_project_config
from opstools.config.validation import (
    ConfigValidationIssue,
    ValidationSeverity,
    validate_config_file,
)
from opstools.core.console import Console


class ValidateCommand(Command):
    """Checks an ops-tools configuration file without running anything."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console

    @property
    def name(self) -> str:
        """Command identifier."""
        return "validate"

    def execute(self, args: Namespace, config: "OpsToolsConfig | None" = None) -> int:
        """Validate ``--config`` or the project file in the current directory.

        Returns:
            0 when valid (warnings allowed), 1 on errors, 3 when no file exists.
        """
        # Built per call so output follows the current stdout.
        console = self._console or Console()
        config_path = self._locate(getattr(args, "config", None))

        if config_path is None:
            console.error("No configuration file found.")
            console.info(f"Looked for: {', '.join(PROJECT_CONFIG_NAMES)}")
            return EXIT_INVALID_USAGE
        if not config_path.exists():
            console.error(f"Configuration file not found: {config_path}")
            return EXIT_INVALID_USAGE

        console.info(f"Validating {config_path}")
        is_valid, issues = validate_config_file(config_path)

        by_severity = {severity: [] for severity in ValidationSeverity}
        for issue in issues:
            by_severity[issue.severity].append(issue)
        self._report(console, "Errors", by_severity[ValidationSeverity.ERROR])
        self._report(console, "Warnings", by_severity[ValidationSeverity.WARNING])

        if not is_valid:
            console.error(
                f"Configuration is invalid ({len(by_severity[ValidationSeverity.ERROR])} error(s))."
            )
            return EXIT_ISSUES_FOUND

        warnings = len(by_severity[ValidationSeverity.WARNING])
        if warnings:
            console.success(f"Configuration is valid with {warnings} warning(s).")
        else:
            console.success("Configuration is valid.")
        return EXIT_SUCCESS

    @staticmethod
    def _locate(explicit: Optional[Path]) -> Optional[Path]:
        if explicit:
            return Path(explicit)
        return find_project_config(Path.cwd())

    @staticmethod
    def _report(console: Console, title: str, issues: List[ConfigValidationIssue]) -> None:
        if not issues:
            return
        console.blank_line()
        console.info(f"{title} ({len(issues)}):")
        for issue in issues:
            detail = f"key {issue.key}" if issue.key else issue.source
            if issue.suggestion:
                detail += f"; Did you mean '{issue.suggestion}'?"
            console.error_item(issue.message, detail)
