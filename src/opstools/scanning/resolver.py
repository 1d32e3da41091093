"""Locating installed scanning tools.

Search order, first hit wins:
1. PATH (with the platform's executable extensions)
2. the install directories release binaries are copied into
   (the configured override, or the system-wide ones)
3. the user-local binary directory (~/.local/bin)
4. the Go toolchain's binary directory, probed only when Go is installed

Absence is a normal outcome and is reported as ``None``.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from opstools.bootstrap.paths import SYSTEM_BIN_DIRS, find_command, local_bin_dir
from opstools.core.logging import get_logger
from opstools.core.subprocess_runner import run_captured
from opstools.scanning.catalog import ScanTool

LOGGER = get_logger(__name__)

_WINDOWS_SUFFIXES = (".exe", ".cmd", ".bat")


def _candidate_names(binary: str) -> List[str]:
    if sys.platform == "win32":
        return [binary, *(f"{binary}{suffix}" for suffix in _WINDOWS_SUFFIXES)]
    return [binary]


def find_in_dir(directory: Optional[Path], binary: str) -> Optional[Path]:
    """Look for ``binary`` directly inside ``directory``."""
    if directory is None:
        return None
    for name in _candidate_names(binary):
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _go_env(key: str) -> Optional[str]:
    try:
        result = run_captured(["go", "env", key])
    except OSError:
        return None
    if result.returncode != 0:
        return None
    value = result.stdout.strip()
    return value or None


def go_bin_dir() -> Optional[Path]:
    """Directory ``go install`` writes binaries to, if Go is available.

    Resolution order: $GOBIN, ``go env GOBIN``, ``go env GOPATH``/bin.
    """
    gobin = os.environ.get("GOBIN", "").strip()
    if gobin:
        return Path(gobin)

    if find_command("go") is None:
        return None

    gobin = _go_env("GOBIN")
    if gobin:
        return Path(gobin)

    gopath = _go_env("GOPATH")
    if gopath:
        # GOPATH may list several entries; go install uses the first one
        return Path(gopath.split(os.pathsep)[0]) / "bin"
    return None


def install_dirs_for(override: Optional[Path] = None) -> List[Path]:
    """Directories a release install may have written to, besides ~/.local/bin."""
    if override is not None:
        return [override]
    if sys.platform == "win32":
        return []
    return list(SYSTEM_BIN_DIRS)


class ToolResolver:
    """Finds an installed binary for a catalog tool."""

    def __init__(
        self,
        local_bin: Optional[Path] = None,
        toolchain_bin: Optional[Callable[[], Optional[Path]]] = None,
        install_dirs: Optional[Sequence[Path]] = None,
    ):
        """Initialize ToolResolver.

        Args:
            local_bin: User-local binary directory (default: ~/.local/bin).
            toolchain_bin: Callable returning the language toolchain's bin
                directory, or None when the toolchain is absent.
            install_dirs: Release install directories probed after PATH
                (default: the system-wide ones).
        """
        self._local_bin = local_bin
        self._toolchain_bin = toolchain_bin or go_bin_dir
        self._install_dirs = list(install_dirs) if install_dirs is not None else install_dirs_for()

    @property
    def local_bin(self) -> Path:
        return self._local_bin if self._local_bin is not None else local_bin_dir()

    @property
    def install_dirs(self) -> List[Path]:
        return list(self._install_dirs)

    def resolve(self, tool: ScanTool) -> Optional[Path]:
        """Return the path of the tool's binary, or None if it is not installed."""
        return self.resolve_binary(tool.binary_name)

    def resolve_binary(self, binary: str) -> Optional[Path]:
        path = find_command(binary)
        if path is not None:
            return path

        for directory in self._install_dirs:
            path = find_in_dir(directory, binary)
            if path is not None:
                LOGGER.debug(f"Found {binary} in install dir: {path}")
                return path

        path = find_in_dir(self.local_bin, binary)
        if path is not None:
            LOGGER.debug(f"Found {binary} in local bin: {path}")
            return path

        path = find_in_dir(self._toolchain_bin(), binary)
        if path is not None:
            LOGGER.debug(f"Found {binary} in toolchain bin: {path}")
        return path
