"""Tests for platform detection functionality."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from opstools.bootstrap.platform import (
    SUPPORTED_ARCH,
    SUPPORTED_OS,
    detect_platform,
    normalize_arch,
    normalize_os,
)


class TestNormalizeOS:
    """Tests for OS normalization."""

    def test_normalize_linux(self) -> None:
        assert normalize_os("Linux") == "linux"

    def test_normalize_darwin(self) -> None:
        assert normalize_os("Darwin") == "darwin"

    def test_normalize_windows(self) -> None:
        assert normalize_os("Windows") == "windows"

    def test_normalize_win32(self) -> None:
        assert normalize_os("win32") == "windows"

    def test_unknown_returns_none(self) -> None:
        assert normalize_os("FreeBSD") is None


class TestNormalizeArch:
    """Tests for architecture normalization."""

    def test_normalize_x86_64(self) -> None:
        assert normalize_arch("x86_64") == "x86_64"

    def test_normalize_amd64(self) -> None:
        assert normalize_arch("AMD64") == "x86_64"

    def test_normalize_arm64(self) -> None:
        assert normalize_arch("arm64") == "aarch64"

    def test_normalize_armv7l(self) -> None:
        assert normalize_arch("armv7l") == "arm"

    def test_unknown_returns_none(self) -> None:
        assert normalize_arch("mips") is None


class TestDetectPlatform:
    """Tests for detect_platform."""

    @pytest.mark.parametrize("system", ["Linux", "Darwin", "Windows"])
    @pytest.mark.parametrize("machine", ["x86_64", "AMD64", "aarch64", "arm64", "armv7l"])
    def test_supported_matrix_has_tokens(self, system: str, machine: str) -> None:
        platform = detect_platform(system, machine)
        assert platform is not None
        assert platform.os in SUPPORTED_OS
        assert platform.arch in SUPPORTED_ARCH
        assert platform.os_tokens
        assert platform.arch_tokens

    @pytest.mark.parametrize(
        "system,machine",
        [("FreeBSD", "x86_64"), ("Linux", "mips"), ("SunOS", "sparc")],
    )
    def test_unsupported_returns_none(self, system: str, machine: str) -> None:
        assert detect_platform(system, machine) is None

    def test_macos_tokens_include_both_spellings(self) -> None:
        platform = detect_platform("Darwin", "arm64")
        assert platform is not None
        assert "darwin" in platform.os_tokens
        assert "macos" in platform.os_tokens

    def test_x86_64_tokens_include_aliases(self) -> None:
        platform = detect_platform("Linux", "x86_64")
        assert platform is not None
        assert {"amd64", "x64", "x86_64"} <= set(platform.arch_tokens)

    def test_windows_prefers_zip(self) -> None:
        platform = detect_platform("Windows", "AMD64")
        assert platform is not None
        assert platform.prefer_zip is True
        assert platform.executable_suffix == ".exe"

    def test_linux_prefers_tar_gz(self) -> None:
        platform = detect_platform("Linux", "x86_64")
        assert platform is not None
        assert platform.prefer_zip is False
        assert platform.executable_suffix == ""
        assert platform.name == "linux-x86_64"

    def test_uses_host_values_by_default(self) -> None:
        with patch("platform.system", return_value="Linux"), \
             patch("platform.machine", return_value="aarch64"):
            platform = detect_platform()
        assert platform is not None
        assert platform.name == "linux-aarch64"


class TestPlatformMatches:
    """Tests for asset name matching."""

    def test_matches_os_and_arch(self) -> None:
        platform = detect_platform("Linux", "x86_64")
        assert platform is not None
        assert platform.matches("tool_linux_x86_64.tar.gz")

    def test_rejects_os_only_match(self) -> None:
        platform = detect_platform("Linux", "x86_64")
        assert platform is not None
        assert not platform.matches("tool_linux_arm64.tar.gz")

    def test_rejects_arch_only_match(self) -> None:
        platform = detect_platform("Linux", "x86_64")
        assert platform is not None
        assert not platform.matches("tool_windows_x86_64.tar.gz")

    def test_case_insensitive(self) -> None:
        platform = detect_platform("Darwin", "arm64")
        assert platform is not None
        assert platform.matches("Tool_MacOS_ARM64.zip")

    def test_matches_64bit_naming(self) -> None:
        platform = detect_platform("Linux", "x86_64")
        assert platform is not None
        assert platform.matches("trivy_0.50.0_Linux-64bit.tar.gz")
