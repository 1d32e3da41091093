"""Tests for ops-tools path helpers."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from opstools.bootstrap.paths import (
    DEFAULT_HOME_DIR_NAME,
    OPSTOOLS_HOME_ENV,
    SCRATCH_DIR_NAME,
    OpsToolsPaths,
    find_command,
    get_ops_tools_home,
    install_dir_candidates,
    is_writable_dir,
    local_bin_dir,
    scratch_root,
    select_install_dir,
)


class TestGetOpsToolsHome:
    """Tests for get_ops_tools_home."""

    def test_env_override(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {OPSTOOLS_HOME_ENV: str(tmp_path)}):
            assert get_ops_tools_home() == tmp_path

    def test_default_under_home(self) -> None:
        env = {k: v for k, v in os.environ.items() if k != OPSTOOLS_HOME_ENV}
        with patch.dict(os.environ, env, clear=True):
            assert get_ops_tools_home() == Path.home() / DEFAULT_HOME_DIR_NAME


class TestOpsToolsPaths:
    """Tests for OpsToolsPaths."""

    def test_config_dir(self, tmp_path: Path) -> None:
        paths = OpsToolsPaths(tmp_path)
        assert paths.config_dir == tmp_path / "config"

    def test_default_uses_home(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {OPSTOOLS_HOME_ENV: str(tmp_path)}):
            assert OpsToolsPaths.default().home == tmp_path


class TestScratchRoot:
    def test_under_system_temp(self) -> None:
        assert scratch_root() == Path(tempfile.gettempdir()) / SCRATCH_DIR_NAME


class TestInstallDirs:
    """Tests for install directory selection."""

    def test_override_wins(self, tmp_path: Path) -> None:
        assert install_dir_candidates(tmp_path) == [tmp_path]
        assert select_install_dir(tmp_path) == tmp_path

    def test_local_bin_is_last_candidate(self) -> None:
        assert install_dir_candidates()[-1] == local_bin_dir()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX system directories")
    def test_writable_system_dir_preferred(self, tmp_path: Path) -> None:
        system_dir = tmp_path / "system"
        system_dir.mkdir()
        with patch("opstools.bootstrap.paths.SYSTEM_BIN_DIRS", (system_dir,)):
            assert select_install_dir() == system_dir

    def test_falls_back_to_local_bin(self, tmp_path: Path) -> None:
        missing = tmp_path / "does-not-exist"
        with patch("opstools.bootstrap.paths.SYSTEM_BIN_DIRS", (missing,)):
            assert select_install_dir() == local_bin_dir()

    def test_is_writable_dir(self, tmp_path: Path) -> None:
        assert is_writable_dir(tmp_path)
        assert not is_writable_dir(tmp_path / "missing")


class TestFindCommand:
    """Tests for find_command."""

    def test_finds_executable_on_search_path(self, tmp_path: Path) -> None:
        exe = tmp_path / "mytool"
        exe.write_text("#!/bin/sh\nexit 0\n")
        exe.chmod(0o755)
        if sys.platform == "win32":
            pytest.skip("POSIX executable bits")
        assert find_command("mytool", search_path=str(tmp_path)) == exe

    def test_missing_returns_none(self, tmp_path: Path) -> None:
        assert find_command("definitely-not-a-tool", search_path=str(tmp_path)) is None
