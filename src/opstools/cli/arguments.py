"""Argument parser construction for ops-tools CLI.

This module builds the argument parser with subcommands:
- ops-tools git-scan - Scan a git repository for secrets and vulnerabilities
- ops-tools status   - Show platform, install directories and tool status
- ops-tools tools    - List the supported scanning tools
- ops-tools validate - Validate an ops-tools configuration file
"""

from __future__ import annotations

import argparse
from pathlib import Path

from opstools.scanning.catalog import CATALOG


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show ops-tools version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _build_git_scan_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'git-scan' subcommand parser."""
    scan_parser = subparsers.add_parser(
        "git-scan",
        help="Scan a git repository for secrets and vulnerabilities.",
        description=(
            "Scan git history and a gitignore-respecting snapshot of the "
            "worktree with every available scanning tool, installing "
            "missing tools first."
        ),
    )

    target_group = scan_parser.add_argument_group("targets")
    target_group.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory inside the repository to scan (default: current directory).",
    )
    target_group.add_argument(
        "--tool",
        action="append",
        dest="tools",
        metavar="NAME",
        choices=[tool.name for tool in CATALOG],
        help="Run only this tool (can be specified multiple times).",
    )

    install_group = scan_parser.add_argument_group("installation")
    install_group.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Install missing tools without asking for confirmation.",
    )
    install_group.add_argument(
        "--no-release-fallback",
        action="store_true",
        help="Never download tools from GitHub releases.",
    )

    config_group = scan_parser.add_argument_group("configuration")
    config_group.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .ops-tools.yml in the repository root).",
    )


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    status_parser = subparsers.add_parser(
        "status",
        help="Show platform, install directories and tool status.",
        description=(
            "Display ops-tools version, platform tokens, install "
            "directories and whether each scanning tool is installed."
        ),
    )
    status_parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file.",
    )


def _build_tools_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'tools' subcommand parser."""
    subparsers.add_parser(
        "tools",
        help="List the supported scanning tools.",
        description="List every catalog tool with its install strategies.",
    )


def _build_validate_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'validate' subcommand parser."""
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate an ops-tools configuration file.",
        description="Check a configuration file for syntax errors, unknown keys and bad values.",
    )
    validate_parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .ops-tools.yml in the current directory).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for ops-tools CLI.

    Returns:
        Configured ArgumentParser instance with subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="ops-tools",
        description="ops-tools - DevOps toolbox.",
        epilog=(
            "Examples:\n"
            "  ops-tools git-scan                 # Scan the current repository\n"
            "  ops-tools git-scan --yes           # Install missing tools without asking\n"
            "  ops-tools git-scan --tool gitleaks # Run a single tool\n"
            "  ops-tools status                   # Show tool status\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
        metavar="COMMAND",
    )

    _build_git_scan_parser(subparsers)
    _build_status_parser(subparsers)
    _build_tools_parser(subparsers)
    _build_validate_parser(subparsers)

    return parser
