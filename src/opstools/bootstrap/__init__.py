"""
Bootstrap module for ops-tools binary management.

This module handles:
- Platform detection (OS + architecture tokens for release assets)
- Home, scratch and install directory management
- HTTP downloads through the host's curl/wget
"""

from opstools.bootstrap.platform import detect_platform, Platform
from opstools.bootstrap.paths import get_ops_tools_home, OpsToolsPaths, find_command

__all__ = [
    "detect_platform",
    "Platform",
    "get_ops_tools_home",
    "OpsToolsPaths",
    "find_command",
]
