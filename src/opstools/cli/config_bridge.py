"""Bridge between CLI arguments and configuration overrides."""

from __future__ import annotations

import argparse
from typing import Any, Dict

from opstools.core.logging import get_logger

LOGGER = get_logger(__name__)


class ConfigBridge:
    """Translates CLI arguments to configuration overrides."""

    @staticmethod
    def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
        """Convert CLI arguments to a config override dict.

        Only flags given explicitly on the command line produce overrides,
        so config file values survive otherwise.

        Args:
            args: Parsed CLI arguments.

        Returns:
            Dictionary of config overrides.
        """
        overrides: Dict[str, Any] = {}
        scanner: Dict[str, Any] = {}

        tools = getattr(args, "tools", None)
        if tools:
            scanner["tools"] = list(dict.fromkeys(tools))

        if getattr(args, "yes", False):
            scanner["auto_install"] = True

        if getattr(args, "no_release_fallback", False):
            scanner["release_fallback"] = False

        if scanner:
            overrides["scanner"] = scanner

        LOGGER.debug(f"CLI config overrides: {overrides}")
        return overrides
