"""Typed configuration for ops-tools.

The configuration is loaded once per process and is immutable afterwards;
components receive it explicitly instead of reading globals.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "ops-tools"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"


@dataclass(frozen=True)
class GitHubConfig:
    """Settings for GitHub release lookups.

    Attributes:
        token: Optional API token sent as a bearer token.
        api_url: Base URL of the GitHub REST API.
        user_agent: User-Agent header value.
    """

    token: Optional[str] = None
    api_url: str = DEFAULT_GITHUB_API_URL
    user_agent: str = DEFAULT_USER_AGENT

    def effective_token(self) -> Optional[str]:
        """Configured token, else $GITHUB_TOKEN, else None."""
        if self.token:
            return self.token
        return os.environ.get(GITHUB_TOKEN_ENV) or None

    def api_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.user_agent,
        }
        token = self.effective_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers


@dataclass(frozen=True)
class ScannerConfig:
    """Settings for the git secret scanning orchestrator.

    Attributes:
        tools: Tool names to run; empty means every catalog tool.
        auto_install: Skip the install confirmation prompt.
        release_fallback: Allow installing from GitHub release assets.
        install_dir: Override for the binary install directory.
    """

    tools: Tuple[str, ...] = ()
    auto_install: bool = False
    release_fallback: bool = True
    install_dir: Optional[Path] = None


@dataclass(frozen=True)
class OpsToolsConfig:
    """Complete ops-tools configuration."""

    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    sources: Tuple[str, ...] = ()

    def selected_tools(self) -> List[str]:
        return list(self.scanner.tools)
