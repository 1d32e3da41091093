"""Tests for opstools.config.validation."""

from __future__ import annotations

from pathlib import Path

from opstools.config.validation import (
    ValidationSeverity,
    _suggest_key,
    is_error_warning,
    validate_config,
    validate_config_file,
)


class TestSuggestKey:
    """Tests for _suggest_key function."""

    def test_suggests_close_match(self) -> None:
        assert _suggest_key("scaner", {"scanner", "github", "version"}) == "scanner"

    def test_returns_none_for_no_match(self) -> None:
        assert _suggest_key("xyz", {"scanner", "github"}) is None

    def test_handles_empty_valid_keys(self) -> None:
        assert _suggest_key("test", set()) is None


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_returns_no_warnings(self) -> None:
        data = {
            "version": 1,
            "scanner": {
                "tools": ["gitleaks", "trivy"],
                "auto_install": True,
                "release_fallback": False,
                "install_dir": "~/bin",
            },
            "github": {"token": "abc", "api_url": "https://ghe.example.com/api/v3"},
        }
        assert validate_config(data, source="test.yml") == []

    def test_warns_on_unknown_top_level_key(self) -> None:
        warnings = validate_config({"scaner": {}}, source="test.yml")
        assert len(warnings) == 1
        assert warnings[0].key == "scaner"
        assert warnings[0].suggestion == "scanner"
        assert not is_error_warning(warnings[0])

    def test_warns_on_unknown_scanner_key(self) -> None:
        warnings = validate_config({"scanner": {"auto_instal": True}}, source="test.yml")
        assert len(warnings) == 1
        assert warnings[0].key == "scanner.auto_instal"
        assert warnings[0].suggestion == "auto_install"

    def test_invalid_tool_name_is_error(self) -> None:
        warnings = validate_config({"scanner": {"tools": ["gitleak"]}}, source="test.yml")
        assert len(warnings) == 1
        assert "Invalid value 'gitleak'" in warnings[0].message
        assert warnings[0].suggestion == "gitleaks"
        assert is_error_warning(warnings[0])

    def test_tools_must_be_list(self) -> None:
        warnings = validate_config({"scanner": {"tools": "gitleaks"}}, source="test.yml")
        assert len(warnings) == 1
        assert is_error_warning(warnings[0])

    def test_boolean_keys_type_checked(self) -> None:
        warnings = validate_config({"scanner": {"auto_install": "yes"}}, source="test.yml")
        assert len(warnings) == 1
        assert "must be a boolean" in warnings[0].message

    def test_github_values_must_be_strings(self) -> None:
        warnings = validate_config({"github": {"token": 123}}, source="test.yml")
        assert len(warnings) == 1
        assert "must be a string" in warnings[0].message

    def test_section_must_be_mapping(self) -> None:
        warnings = validate_config({"scanner": ["gitleaks"]}, source="test.yml")
        assert len(warnings) == 1
        assert is_error_warning(warnings[0])


class TestValidateConfigFile:
    """Tests for validate_config_file."""

    def test_missing_file(self, tmp_path: Path) -> None:
        is_valid, issues = validate_config_file(tmp_path / "missing.yml")
        assert not is_valid
        assert issues[0].severity == ValidationSeverity.ERROR

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / ".ops-tools.yml"
        path.write_text("scanner: [unclosed\n")
        is_valid, issues = validate_config_file(path)
        assert not is_valid
        assert "Invalid YAML" in issues[0].message

    def test_empty_file_is_valid_with_warning(self, tmp_path: Path) -> None:
        path = tmp_path / ".ops-tools.yml"
        path.write_text("")
        is_valid, issues = validate_config_file(path)
        assert is_valid
        assert issues[0].severity == ValidationSeverity.WARNING

    def test_unknown_key_is_only_a_warning(self, tmp_path: Path) -> None:
        path = tmp_path / ".ops-tools.yml"
        path.write_text("scanner:\n  toolz: [gitleaks]\n")
        is_valid, issues = validate_config_file(path)
        assert is_valid
        assert issues[0].severity == ValidationSeverity.WARNING
        assert issues[0].suggestion == "tools"

    def test_type_error_makes_file_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / ".ops-tools.yml"
        path.write_text("scanner:\n  release_fallback: maybe\n")
        is_valid, issues = validate_config_file(path)
        assert not is_valid
        assert issues[0].severity == ValidationSeverity.ERROR
