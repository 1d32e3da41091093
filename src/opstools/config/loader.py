"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.ops-tools.yml)
- Global config (~/.ops-tools/config/config.yml)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from opstools.bootstrap.paths import OpsToolsPaths
from opstools.config.models import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_USER_AGENT,
    GitHubConfig,
    OpsToolsConfig,
    ScannerConfig,
)
from opstools.config.validation import is_error_warning, validate_config
from opstools.core.errors import ConfigError
from opstools.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".ops-tools.yml", ".ops-tools.yaml", "ops-tools.yml", "ops-tools.yaml"]
GLOBAL_CONFIG_NAME = "config.yml"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def load_config(
    project_root: Optional[Path] = None,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> OpsToolsConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.ops-tools.yml)
    3. Global config (~/.ops-tools/config/config.yml)
    4. Built-in defaults

    Args:
        project_root: Project root directory for finding .ops-tools.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.

    Returns:
        Merged, immutable OpsToolsConfig instance.

    Raises:
        ConfigError: If a config file is missing, unparsable or has type errors.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path is not None:
        try:
            merged = merge_configs(merged, _load_validated(global_path))
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except ConfigError as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(str(cli_config_path), "config file not found")
        merged = merge_configs(merged, _load_validated(cli_config_path))
        sources.append(f"custom:{cli_config_path}")
        LOGGER.debug(f"Loaded custom config from {cli_config_path}")
    elif project_root is not None:
        project_path = find_project_config(project_root)
        if project_path is not None:
            merged = merge_configs(merged, _load_validated(project_path))
            sources.append(f"project:{project_path}")
            LOGGER.debug(f"Loaded project config from {project_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged, sources=sources)
    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _load_validated(path: Path) -> Dict[str, Any]:
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"invalid YAML: {e}") from e
    except OSError as e:
        raise ConfigError(str(path), f"unable to read: {e}") from e

    errors = [w for w in validate_config(data, source=str(path)) if is_error_warning(w)]
    if errors:
        raise ConfigError(str(path), "; ".join(w.message for w in errors))
    return data


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.exists():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Find global config at ~/.ops-tools/config/config.yml.

    Returns:
        Path to global config if it exists, None otherwise.
    """
    config_path = OpsToolsPaths.default().config_dir / GLOBAL_CONFIG_NAME
    if config_path.exists():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(str(path), f"config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any], sources: Optional[List[str]] = None) -> OpsToolsConfig:
    """Convert validated dict to typed OpsToolsConfig."""
    scanner_data = data.get("scanner") or {}
    install_dir = scanner_data.get("install_dir")
    scanner = ScannerConfig(
        tools=tuple(scanner_data.get("tools") or ()),
        auto_install=bool(scanner_data.get("auto_install", False)),
        release_fallback=bool(scanner_data.get("release_fallback", True)),
        install_dir=Path(install_dir).expanduser() if install_dir else None,
    )

    github_data = data.get("github") or {}
    github = GitHubConfig(
        token=github_data.get("token") or None,
        api_url=(github_data.get("api_url") or DEFAULT_GITHUB_API_URL).rstrip("/"),
        user_agent=github_data.get("user_agent") or DEFAULT_USER_AGENT,
    )

    return OpsToolsConfig(scanner=scanner, github=github, sources=tuple(sources or ()))


def get_default_config() -> OpsToolsConfig:
    """Get default configuration (every tool, interactive install)."""
    return OpsToolsConfig()
