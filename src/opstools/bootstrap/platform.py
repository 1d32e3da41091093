"""Platform detection for release asset selection.

Maps the host OS and CPU architecture onto lists of lowercase tokens.
Release asset names on GitHub are not standardized, so an asset matches a
platform when its name contains any OS token and any architecture token.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# OS tokens keyed by normalized OS name
_OS_TOKENS: Dict[str, Tuple[str, ...]] = {
    "linux": ("linux",),
    "darwin": ("darwin", "macos"),
    "windows": ("windows",),
}

# Architecture tokens keyed by normalized architecture name.
# "64bit" covers Trivy's "Linux-64bit" naming.
_ARCH_TOKENS: Dict[str, Tuple[str, ...]] = {
    "x86_64": ("x86_64", "amd64", "x64", "64bit"),
    "aarch64": ("aarch64", "arm64"),
    "arm": ("armv7", "armv6", "arm"),
}

# OS normalization map (platform.system() / sys.platform spellings)
_OS_MAP = {
    "linux": "linux",
    "darwin": "darwin",
    "macos": "darwin",
    "windows": "windows",
    "win32": "windows",
}

# Architecture normalization map (platform.machine() spellings)
_ARCH_MAP = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "arm": "arm",
    "armv6l": "arm",
    "armv7l": "arm",
    "armv7": "arm",
}

SUPPORTED_OS = frozenset(_OS_TOKENS)
SUPPORTED_ARCH = frozenset(_ARCH_TOKENS)


def normalize_os(system: str) -> Optional[str]:
    """Normalize an OS identifier, returning None if it is not supported."""
    return _OS_MAP.get(system.strip().lower())


def normalize_arch(machine: str) -> Optional[str]:
    """Normalize an architecture identifier, returning None if unknown.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string or None if unknown.
    """
    return _ARCH_MAP.get(machine.strip().lower())


@dataclass(frozen=True)
class Platform:
    """Token sets describing the host platform.

    Attributes:
        os: Normalized OS name (linux, darwin, windows).
        arch: Normalized architecture (x86_64, aarch64, arm).
        os_tokens: Substrings identifying the OS in asset names.
        arch_tokens: Substrings identifying the architecture in asset names.
        prefer_zip: Whether zip archives are preferred over tar.gz.
    """

    os: str
    arch: str
    os_tokens: Tuple[str, ...]
    arch_tokens: Tuple[str, ...]
    prefer_zip: bool

    @property
    def name(self) -> str:
        """Return e.g. "linux-x86_64"."""
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def executable_suffix(self) -> str:
        return ".exe" if self.is_windows else ""

    def matches(self, asset_name: str) -> bool:
        """Check whether an asset name carries both an OS and an arch token."""
        lowered = asset_name.lower()
        return any(token in lowered for token in self.os_tokens) and any(
            token in lowered for token in self.arch_tokens
        )


def detect_platform(
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> Optional[Platform]:
    """Build a Platform from the host (or the given) identifiers.

    Args:
        system: OS identifier; defaults to platform.system().
        machine: Architecture identifier; defaults to platform.machine().

    Returns:
        Platform, or None if the OS or the architecture is unsupported.
    """
    os_name = normalize_os(system if system is not None else platform.system())
    arch = normalize_arch(machine if machine is not None else platform.machine())
    if os_name is None or arch is None:
        return None

    return Platform(
        os=os_name,
        arch=arch,
        os_tokens=_OS_TOKENS[os_name],
        arch_tokens=_ARCH_TOKENS[arch],
        prefer_zip=os_name == "windows",
    )
