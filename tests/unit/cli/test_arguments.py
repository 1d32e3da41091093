"""Tests for CLI argument parsing and config overrides."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path

import pytest

from opstools.cli.arguments import build_parser
from opstools.cli.config_bridge import ConfigBridge


class TestBuildParser:
    """Tests for build_parser."""

    def test_git_scan_defaults(self) -> None:
        args = build_parser().parse_args(["git-scan"])

        assert args.command == "git-scan"
        assert args.path == "."
        assert args.tools is None
        assert args.yes is False
        assert args.no_release_fallback is False
        assert args.config is None

    def test_git_scan_options(self) -> None:
        args = build_parser().parse_args([
            "--debug", "git-scan", "repo", "--tool", "gitleaks", "--tool", "trivy",
            "-y", "--no-release-fallback", "--config", "ops.yml",
        ])

        assert args.debug is True
        assert args.path == "repo"
        assert args.tools == ["gitleaks", "trivy"]
        assert args.yes is True
        assert args.no_release_fallback is True
        assert args.config == Path("ops.yml")

    def test_rejects_unknown_tool(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["git-scan", "--tool", "nmap"])

    @pytest.mark.parametrize("command", ["status", "tools", "validate"])
    def test_other_commands(self, command: str) -> None:
        assert build_parser().parse_args([command]).command == command

    def test_no_command(self) -> None:
        args = build_parser().parse_args([])
        assert args.command is None
        assert args.version is False


class TestConfigBridge:
    """Tests for ConfigBridge.args_to_overrides."""

    def test_no_flags_no_overrides(self) -> None:
        args = build_parser().parse_args(["git-scan"])
        assert ConfigBridge.args_to_overrides(args) == {}

    def test_all_flags(self) -> None:
        args = build_parser().parse_args([
            "git-scan", "--tool", "trivy", "--tool", "gitleaks", "--tool", "trivy",
            "--yes", "--no-release-fallback",
        ])

        assert ConfigBridge.args_to_overrides(args) == {
            "scanner": {
                "tools": ["trivy", "gitleaks"],
                "auto_install": True,
                "release_fallback": False,
            }
        }

    def test_missing_attributes_are_ignored(self) -> None:
        assert ConfigBridge.args_to_overrides(Namespace(command="status")) == {}
