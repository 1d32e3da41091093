"""Tests for git-scan command."""

from __future__ import annotations

import io
from argparse import Namespace
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from opstools.cli.commands.git_scan import GitScanCommand
from opstools.cli.exit_codes import (
    EXIT_CANCELLED,
    EXIT_INVALID_USAGE,
    EXIT_ISSUES_FOUND,
    EXIT_SCANNER_ERROR,
    EXIT_SUCCESS,
)
from opstools.config.models import OpsToolsConfig, ScannerConfig
from opstools.core.console import Console
from opstools.core.errors import (
    CancelledError,
    CommandError,
    ConfigError,
    InvalidPathError,
    IoError,
    NotARepositoryError,
)
from opstools.scanning.orchestrator import ScanSummary


def _command(run_result=None, run_error=None):
    buffer = io.StringIO()
    orchestrator = MagicMock()
    if run_error is not None:
        orchestrator.run.side_effect = run_error
    else:
        orchestrator.run.return_value = run_result
    factory = MagicMock(return_value=orchestrator)
    command = GitScanCommand(
        version="0.1.0",
        console=Console(output=buffer, color=False),
        orchestrator_factory=factory,
    )
    return command, factory, orchestrator, buffer


def _args(**kwargs) -> Namespace:
    defaults = {"path": ".", "yes": False}
    defaults.update(kwargs)
    return Namespace(**defaults)


class TestGitScanCommand:
    """Tests for GitScanCommand."""

    def test_command_name(self) -> None:
        command, *_ = _command()
        assert command.name == "git-scan"

    def test_all_clean_returns_success(self) -> None:
        command, _, orchestrator, _ = _command(ScanSummary(clean=3))

        assert command.execute(_args(path="repo"), OpsToolsConfig()) == EXIT_SUCCESS
        orchestrator.run.assert_called_once_with(Path("repo"))

    def test_failures_return_issues_found(self) -> None:
        command, *_ = _command(ScanSummary(clean=2, failed=1, findings=1))
        assert command.execute(_args(), OpsToolsConfig()) == EXIT_ISSUES_FOUND

    def test_scan_errors_without_findings_return_issues_found(self) -> None:
        command, *_ = _command(ScanSummary(clean=0, failed=1))
        assert command.execute(_args(), OpsToolsConfig()) == EXIT_ISSUES_FOUND

    def test_skipped_tools_alone_are_success(self) -> None:
        command, *_ = _command(ScanSummary(clean=1, skipped_tools=["semgrep"]))
        assert command.execute(_args(), OpsToolsConfig()) == EXIT_SUCCESS

    @pytest.mark.parametrize(
        "error, expected",
        [
            (CancelledError("Scan cancelled by user"), EXIT_CANCELLED),
            (NotARepositoryError("/tmp/x"), EXIT_INVALID_USAGE),
            (InvalidPathError("/tmp/typo"), EXIT_INVALID_USAGE),
            (ConfigError("scanner.tools", "unknown tool"), EXIT_INVALID_USAGE),
            (CommandError("git", "git is not installed or not on PATH"), EXIT_SCANNER_ERROR),
            (IoError("/tmp/snap", OSError("disk full")), EXIT_SCANNER_ERROR),
        ],
    )
    def test_error_mapping(self, error: Exception, expected: int) -> None:
        command, *_ = _command(run_error=error)
        assert command.execute(_args(), OpsToolsConfig()) == expected

    def test_fatal_error_is_printed(self) -> None:
        command, _, _, buffer = _command(run_error=NotARepositoryError("/tmp/x"))
        command.execute(_args(), OpsToolsConfig())
        assert "Not a git repository" in buffer.getvalue()

    def test_yes_flag_skips_prompts(self) -> None:
        command, factory, _, _ = _command(ScanSummary())
        command.execute(_args(yes=True), OpsToolsConfig())
        assert factory.call_args.kwargs["prompts"].assume_yes is True

    def test_auto_install_config_skips_prompts(self) -> None:
        command, factory, _, _ = _command(ScanSummary())
        config = OpsToolsConfig(scanner=ScannerConfig(auto_install=True))
        command.execute(_args(), config)

        assert factory.call_args.kwargs["prompts"].assume_yes is True
        assert factory.call_args.kwargs["config"] is config

    def test_prompts_interactive_by_default(self) -> None:
        command, factory, _, _ = _command(ScanSummary())
        command.execute(_args(), None)
        assert factory.call_args.kwargs["prompts"].assume_yes is False
