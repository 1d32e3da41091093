"""Configuration validation for ops-tools.

Validates configuration keys and value types, warning on unknown keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml

from opstools.core.logging import get_logger

LOGGER = get_logger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Config will fail at runtime
    WARNING = "warning"  # Likely mistake but config usable


@dataclass
class ConfigValidationIssue:
    """A validation issue for configuration with severity."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "version",
    "scanner",
    "github",
}

# Valid keys under scanner section
VALID_SCANNER_KEYS: Set[str] = {
    "tools",
    "auto_install",
    "release_fallback",
    "install_dir",
}

# Valid keys under github section
VALID_GITHUB_KEYS: Set[str] = {
    "token",
    "api_url",
    "user_agent",
}

# Valid tool names for scanner.tools
VALID_TOOL_NAMES: Set[str] = {
    "gitleaks",
    "trufflehog",
    "git-secrets",
    "trivy",
    "semgrep",
}

_BOOL_KEYS = ("auto_install", "release_fallback")
_STR_GITHUB_KEYS = ("token", "api_url", "user_agent")
_ERROR_PHRASES = ("must be a", "Invalid value", "Config must be")


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Does not raise exceptions - returns warnings instead.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):  # type: ignore[unreachable]
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings  # type: ignore[unreachable]

    warnings.extend(_check_unknown_keys(data, VALID_TOP_LEVEL_KEYS, source, prefix=""))

    scanner = data.get("scanner")
    if scanner is not None:
        if not isinstance(scanner, dict):
            warnings.append(ConfigValidationWarning(
                message=f"'scanner' must be a mapping, got {type(scanner).__name__}",
                source=source,
                key="scanner",
            ))
        else:
            warnings.extend(_validate_scanner(scanner, source))

    github = data.get("github")
    if github is not None:
        if not isinstance(github, dict):
            warnings.append(ConfigValidationWarning(
                message=f"'github' must be a mapping, got {type(github).__name__}",
                source=source,
                key="github",
            ))
        else:
            warnings.extend(_check_unknown_keys(github, VALID_GITHUB_KEYS, source, prefix="github."))
            for key in _STR_GITHUB_KEYS:
                value = github.get(key)
                if value is not None and not isinstance(value, str):
                    warnings.append(ConfigValidationWarning(
                        message=f"'github.{key}' must be a string",
                        source=source,
                        key=f"github.{key}",
                    ))

    return warnings


def _validate_scanner(scanner: Dict[str, Any], source: str) -> List[ConfigValidationWarning]:
    warnings = _check_unknown_keys(scanner, VALID_SCANNER_KEYS, source, prefix="scanner.")

    tools = scanner.get("tools")
    if tools is not None:
        if not isinstance(tools, list):
            warnings.append(ConfigValidationWarning(
                message="'scanner.tools' must be a list",
                source=source,
                key="scanner.tools",
            ))
        else:
            for tool in tools:
                if not isinstance(tool, str) or tool not in VALID_TOOL_NAMES:
                    suggestion = _suggest_key(str(tool), VALID_TOOL_NAMES)
                    warning = ConfigValidationWarning(
                        message=f"Invalid value '{tool}' for 'scanner.tools'. "
                                f"Valid values: {', '.join(sorted(VALID_TOOL_NAMES))}",
                        source=source,
                        key="scanner.tools",
                        suggestion=suggestion,
                    )
                    warnings.append(warning)
                    _log_warning(warning)

    for key in _BOOL_KEYS:
        value = scanner.get(key)
        if value is not None and not isinstance(value, bool):
            warnings.append(ConfigValidationWarning(
                message=f"'scanner.{key}' must be a boolean",
                source=source,
                key=f"scanner.{key}",
            ))

    install_dir = scanner.get("install_dir")
    if install_dir is not None and not isinstance(install_dir, str):
        warnings.append(ConfigValidationWarning(
            message="'scanner.install_dir' must be a string",
            source=source,
            key="scanner.install_dir",
        ))

    return warnings


def is_error_warning(warning: ConfigValidationWarning) -> bool:
    """Type mismatches and invalid values are errors, unknown keys are warnings."""
    return any(phrase in warning.message for phrase in _ERROR_PHRASES)


def _check_unknown_keys(
    data: Dict[str, Any],
    valid_keys: Set[str],
    source: str,
    prefix: str,
) -> List[ConfigValidationWarning]:
    warnings: List[ConfigValidationWarning] = []
    for key in data.keys():
        if key not in valid_keys:
            suggestion = _suggest_key(str(key), valid_keys)
            location = "top-level key" if not prefix else f"key in '{prefix.rstrip('.')}'"
            warning = ConfigValidationWarning(
                message=f"Unknown {location} '{key}'",
                source=source,
                key=f"{prefix}{key}",
                suggestion=suggestion,
            )
            warnings.append(warning)
            _log_warning(warning)
    return warnings


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)


def validate_config_file(config_path: Path) -> Tuple[bool, List[ConfigValidationIssue]]:
    """Validate a configuration file from disk.

    Checks file existence, YAML syntax, and configuration semantics.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Tuple of (is_valid, issues) where is_valid is False if any errors exist.
    """
    issues: List[ConfigValidationIssue] = []
    source = str(config_path)

    if not config_path.exists():
        issues.append(ConfigValidationIssue(
            message=f"Configuration file not found: {config_path}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return False, issues

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        issues.append(ConfigValidationIssue(
            message=f"Invalid YAML syntax: {e}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return False, issues

    if data is None:
        issues.append(ConfigValidationIssue(
            message="Configuration file is empty",
            source=source,
            severity=ValidationSeverity.WARNING,
        ))
        return True, issues

    for warning in validate_config(data, source):
        is_error = is_error_warning(warning)
        issues.append(ConfigValidationIssue(
            message=warning.message,
            source=warning.source,
            severity=ValidationSeverity.ERROR if is_error else ValidationSeverity.WARNING,
            key=warning.key,
            suggestion=warning.suggestion,
        ))

    has_errors = any(issue.severity == ValidationSeverity.ERROR for issue in issues)
    return not has_errors, issues
