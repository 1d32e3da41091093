"""Path management for ops-tools.

Handles the ~/.ops-tools directory, scratch directories under the system
temp root, and the directories binaries are installed into.
"""

from __future__ import annotations

import os
import shutil
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, List, Optional

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".ops-tools"

# Environment variable to override home directory
OPSTOOLS_HOME_ENV = "OPSTOOLS_HOME"

# Name of the directory created under the system temp root
SCRATCH_DIR_NAME = "ops-tools"

# System-wide install directories tried before the user-local one
SYSTEM_BIN_DIRS = (Path("/usr/local/bin"),)


def get_ops_tools_home() -> Path:
    """Get the ops-tools home directory path.

    Resolution order:
    1. OPSTOOLS_HOME environment variable (if set)
    2. ~/.ops-tools (default)

    Returns:
        Path to the ops-tools home directory.
    """
    env_home = os.environ.get(OPSTOOLS_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


def local_bin_dir() -> Path:
    """User-local binary directory (~/.local/bin)."""
    return Path.home() / ".local" / "bin"


def scratch_root() -> Path:
    """Directory under the system temp root used for throwaway files."""
    return Path(tempfile.gettempdir()) / SCRATCH_DIR_NAME


def is_writable_dir(path: Path) -> bool:
    """Check that ``path`` is an existing directory we can write into."""
    return path.is_dir() and os.access(path, os.W_OK | os.X_OK)


@dataclass
class OpsToolsPaths:
    """Manages paths within the ops-tools home directory.

    Directory structure:
        ~/.ops-tools/
            config/     - Global configuration (config.yml)
    """

    home: Path

    # Subdirectory names
    _CONFIG_DIR: ClassVar[str] = "config"

    @classmethod
    def default(cls) -> "OpsToolsPaths":
        """Create paths from the default ops-tools home."""
        return cls(get_ops_tools_home())

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files."""
        return self.home / self._CONFIG_DIR


def install_dir_candidates(override: Optional[Path] = None) -> List[Path]:
    """Return install directories in order of preference.

    An explicit override wins outright. Otherwise system-wide directories
    come first (only used when writable), then the user-local directory.
    """
    if override is not None:
        return [override]
    candidates: List[Path] = []
    if sys.platform != "win32":
        candidates.extend(SYSTEM_BIN_DIRS)
    candidates.append(local_bin_dir())
    return candidates


def select_install_dir(override: Optional[Path] = None) -> Path:
    """Pick the directory a downloaded binary is installed into.

    The first writable system directory is used; otherwise the user-local
    binary directory is returned (it may not exist yet, the caller creates
    it).
    """
    candidates = install_dir_candidates(override)
    for candidate in candidates[:-1]:
        if is_writable_dir(candidate):
            return candidate
    return candidates[-1]


def find_command(command: str, search_path: Optional[str] = None) -> Optional[Path]:
    """Locate an executable on PATH.

    Absolute paths and paths containing a separator are checked directly.
    On Windows the PATHEXT extensions (.exe, .cmd, .bat, ...) are tried.

    Args:
        command: Program name or path.
        search_path: PATH-style string to search instead of $PATH.

    Returns:
        Path to the executable, or None if it is not found.
    """
    found = shutil.which(command, path=search_path)
    return Path(found) if found else None
