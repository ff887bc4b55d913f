"""
Unit tests for the platform detection module.

Tests cover:
- PlatformInfo Go tag mapping
- OS and architecture normalization
- Shell detection
- Cache behavior
"""

from unittest.mock import patch

import pytest

from getgo.core.platform import (
    PlatformInfo,
    _detect_architecture,
    _detect_os,
    clear_platform_cache,
    current_shell,
    detect_platform,
)


class TestPlatformInfo:
    """Tests for PlatformInfo dataclass."""

    def test_platform_string(self):
        info = PlatformInfo("linux", "x64", "5.15")
        assert info.platform_string() == "linux-x64"

    @pytest.mark.parametrize(
        "os_name,arch,expected",
        [
            ("linux", "x64", ("linux", "amd64")),
            ("linux", "arm64", ("linux", "arm64")),
            ("linux", "x86", ("linux", "386")),
            ("linux", "arm", ("linux", "armv6l")),
            ("macos", "arm64", ("darwin", "arm64")),
            ("windows", "x64", ("windows", "amd64")),
            ("freebsd", "arm", ("freebsd", "arm")),
            ("linux", "ppc64le", ("linux", "ppc64le")),
        ],
    )
    def test_archive_tags(self, os_name, arch, expected):
        info = PlatformInfo(os_name, arch)
        assert (info.archive_os(), info.archive_arch()) == expected

    def test_goarch_keeps_arm_outside_archive_tag(self):
        info = PlatformInfo("linux", "arm")
        assert info.goarch() == "arm"
        assert info.archive_arch() == "armv6l"

    def test_executable_name(self):
        assert PlatformInfo("windows", "x64").executable_name("go") == "go.exe"
        assert PlatformInfo("linux", "x64").executable_name("go") == "go"

    def test_str(self):
        assert str(PlatformInfo("linux", "x64", "5.15")) == "linux-x64 v5.15"
        assert str(PlatformInfo("linux", "x64")) == "linux-x64"


class TestDetection:
    """Tests for OS/architecture detection with mocking."""

    @pytest.mark.parametrize(
        "system,expected",
        [("Linux", "linux"), ("Darwin", "macos"), ("Windows", "windows"), ("FreeBSD", "freebsd")],
    )
    def test_detect_os(self, system, expected):
        with patch("platform.system", return_value=system):
            assert _detect_os() == expected

    def test_detect_os_unsupported(self):
        with patch("platform.system", return_value="Plan9"):
            with pytest.raises(RuntimeError, match="Unsupported operating system"):
                _detect_os()

    @pytest.mark.parametrize(
        "machine,expected",
        [
            ("x86_64", "x64"),
            ("AMD64", "x64"),
            ("aarch64", "arm64"),
            ("arm64", "arm64"),
            ("i686", "x86"),
            ("armv7l", "arm"),
            ("s390x", "s390x"),
        ],
    )
    def test_detect_architecture(self, machine, expected):
        with patch("platform.machine", return_value=machine):
            assert _detect_architecture() == expected

    def test_detect_platform_is_cached(self):
        first = detect_platform()
        assert detect_platform() is first
        clear_platform_cache()
        assert detect_platform() == first


class TestCurrentShell:
    def test_shell_from_environment(self):
        env = {"SHELL": "/bin/zsh"}
        assert current_shell(env, PlatformInfo("linux", "x64")) == "/bin/zsh"

    def test_windows_falls_back_to_comspec(self):
        env = {"ComSpec": "C:\\Windows\\system32\\cmd.exe"}
        assert current_shell(env, PlatformInfo("windows", "x64")).endswith("cmd.exe")

    def test_unknown_shell_is_empty(self):
        assert current_shell({}, PlatformInfo("linux", "x64")) == ""
