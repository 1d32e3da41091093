"""Pytest configuration and fixtures for integration tests.

These tests drive a real ``git`` binary against throwaway repositories and
replace the scanning tools and package managers with small Python scripts
placed on a private PATH.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

_git_path = shutil.which("git")


def git(repo: Path, *args: str) -> subprocess.CompletedProcess:
    """Run git inside ``repo`` with a fixed identity."""
    return subprocess.run(
        [
            "git",
            "-c", "user.email=tests@example.com",
            "-c", "user.name=ops-tools tests",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )


@pytest.fixture
def run_git() -> Callable[..., subprocess.CompletedProcess]:
    return git


@pytest.fixture
def git_env(monkeypatch, tmp_path: Path) -> Path:
    """Isolate git and PATH from the host; return the stub bin directory.

    PATH holds only the stub directory, with git linked into it, so
    package managers and scanners on the host are invisible.
    """
    stub_bin = tmp_path / "stub-bin"
    stub_bin.mkdir()
    if _git_path:
        (stub_bin / "git").symlink_to(Path(_git_path).resolve())
    monkeypatch.setenv("PATH", str(stub_bin))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("OPSTOOLS_HOME", str(tmp_path / "ops-home"))
    monkeypatch.delenv("GOBIN", raising=False)
    return stub_bin


@pytest.fixture
def make_repo(git_env: Path, tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Factory creating a committed repository from a ``{path: content}`` map."""

    def _make(files: Dict[str, str]) -> Path:
        repo = tmp_path / "repo"
        repo.mkdir()
        git(repo, "init", "-q")
        for name, content in files.items():
            path = repo / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        if files:
            git(repo, "add", "-A")
            git(repo, "commit", "-q", "-m", "initial")
        return repo

    return _make


@pytest.fixture
def write_stub(git_env: Path) -> Callable[..., Path]:
    """Factory writing an executable Python script into the stub PATH."""

    def _write(name: str, body: str, directory: Path = git_env) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        script = directory / name
        script.write_text(f"#!{sys.executable}\nimport os, sys\n{body}\n")
        script.chmod(0o755)
        return script

    return _write
