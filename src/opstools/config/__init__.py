"""Configuration loading for ops-tools."""

from opstools.config.loader import load_config, get_default_config
from opstools.config.models import GitHubConfig, OpsToolsConfig, ScannerConfig

__all__ = [
    "load_config",
    "get_default_config",
    "GitHubConfig",
    "OpsToolsConfig",
    "ScannerConfig",
]
