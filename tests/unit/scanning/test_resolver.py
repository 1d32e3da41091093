"""Tests for locating installed tools."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from opstools.bootstrap.paths import SYSTEM_BIN_DIRS
from opstools.scanning.catalog import GITLEAKS
from opstools.scanning.resolver import ToolResolver, find_in_dir, go_bin_dir, install_dirs_for


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")
    path.chmod(0o755)
    return path


class TestToolResolver:
    """Tests for ToolResolver search order."""

    def test_path_hit_wins(self, tmp_path: Path) -> None:
        on_path = tmp_path / "path" / "gitleaks"
        local = _touch(tmp_path / "local" / "gitleaks")
        resolver = ToolResolver(local_bin=local.parent, toolchain_bin=lambda: None, install_dirs=[])
        with patch("opstools.scanning.resolver.find_command", return_value=on_path):
            assert resolver.resolve(GITLEAKS) == on_path

    def test_local_bin_before_toolchain(self, tmp_path: Path) -> None:
        local = _touch(tmp_path / "local" / "gitleaks")
        toolchain = _touch(tmp_path / "go" / "bin" / "gitleaks")
        resolver = ToolResolver(
            local_bin=local.parent, toolchain_bin=lambda: toolchain.parent, install_dirs=[]
        )
        with patch("opstools.scanning.resolver.find_command", return_value=None):
            assert resolver.resolve(GITLEAKS) == local

    def test_toolchain_bin_checked_last(self, tmp_path: Path) -> None:
        toolchain = _touch(tmp_path / "go" / "bin" / "gitleaks")
        resolver = ToolResolver(
            local_bin=tmp_path / "empty", toolchain_bin=lambda: toolchain.parent, install_dirs=[]
        )
        with patch("opstools.scanning.resolver.find_command", return_value=None):
            assert resolver.resolve(GITLEAKS) == toolchain

    def test_absent_returns_none(self, tmp_path: Path) -> None:
        resolver = ToolResolver(local_bin=tmp_path, toolchain_bin=lambda: None, install_dirs=[])
        with patch("opstools.scanning.resolver.find_command", return_value=None):
            assert resolver.resolve(GITLEAKS) is None

    def test_install_dir_checked_after_path(self, tmp_path: Path) -> None:
        installed = _touch(tmp_path / "custom-bin" / "gitleaks")
        local = _touch(tmp_path / "local" / "gitleaks")
        resolver = ToolResolver(
            local_bin=local.parent,
            toolchain_bin=lambda: None,
            install_dirs=install_dirs_for(installed.parent),
        )
        with patch("opstools.scanning.resolver.find_command", return_value=None):
            assert resolver.resolve(GITLEAKS) == installed


def test_install_dirs_for_override_replaces_system_dirs(tmp_path: Path) -> None:
    assert install_dirs_for(tmp_path) == [tmp_path]


@pytest.mark.skipif(sys.platform == "win32", reason="no system-wide bin directory")
def test_install_dirs_default_to_system_dirs() -> None:
    assert install_dirs_for() == list(SYSTEM_BIN_DIRS)
    assert ToolResolver().install_dirs == list(SYSTEM_BIN_DIRS)


def test_find_in_dir_ignores_directories(tmp_path: Path) -> None:
    (tmp_path / "gitleaks").mkdir()
    assert find_in_dir(tmp_path, "gitleaks") is None
    assert find_in_dir(None, "gitleaks") is None


class TestGoBinDir:
    """Tests for go_bin_dir."""

    def test_gobin_env(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"GOBIN": str(tmp_path)}):
            assert go_bin_dir() == tmp_path

    def test_no_go_toolchain(self) -> None:
        env = {k: v for k, v in os.environ.items() if k != "GOBIN"}
        with patch.dict(os.environ, env, clear=True), \
             patch("opstools.scanning.resolver.find_command", return_value=None):
            assert go_bin_dir() is None

    def test_gopath_first_entry(self, tmp_path: Path) -> None:
        env = {k: v for k, v in os.environ.items() if k != "GOBIN"}
        gopath = os.pathsep.join([str(tmp_path / "one"), str(tmp_path / "two")])
        answers = {"GOBIN": None, "GOPATH": gopath}
        with patch.dict(os.environ, env, clear=True), \
             patch("opstools.scanning.resolver.find_command", return_value=Path("/usr/bin/go")), \
             patch("opstools.scanning.resolver._go_env", side_effect=answers.get):
            assert go_bin_dir() == tmp_path / "one" / "bin"
