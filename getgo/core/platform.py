"""
Platform detection for getgo.

Identifies the host OS and CPU and translates them into the GOOS/GOARCH
tags the release catalog uses, so archive entries can be matched against
the running machine. Linux arm is the one irregular case: its archives are
published as armv6l.

Usage:
    from getgo.core.platform import detect_platform

    platform_info = detect_platform()
    print(f"Archive tag: {platform_info.archive_os()}-{platform_info.archive_arch()}")
"""

import functools
import os
import platform
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos', 'freebsd')
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm', 'ppc64le', ...)
        os_version: OS version string (e.g., '10.0.19041', '5.15.0', '14.1')
    """

    os: str
    arch: str
    os_version: str = ""

    def platform_string(self) -> str:
        """
        Short host label used in messages (e.g. 'linux-x64', 'macos-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64', '5.15').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    def goos(self) -> str:
        """Go's name for the operating system (GOOS)."""
        return {"macos": "darwin"}.get(self.os, self.os)

    def goarch(self) -> str:
        """Go's name for the architecture (GOARCH)."""
        arch_map = {
            "x64": "amd64",
            "x86": "386",
        }
        return arch_map.get(self.arch, self.arch)

    def archive_os(self) -> str:
        """OS tag used by the release catalog's archive entries."""
        return self.goos()

    def archive_arch(self) -> str:
        """
        Architecture tag used by the release catalog's archive entries.

        Linux arm archives are published as 'armv6l'.

        Example:
            >>> PlatformInfo('linux', 'arm').archive_arch()
            'armv6l'
        """
        goarch = self.goarch()
        if self.goos() == "linux" and goarch == "arm":
            return "armv6l"
        return goarch

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def executable_name(self, name: str) -> str:
        """Append '.exe' on Windows."""
        return f"{name}.exe" if self.is_windows else name

    def __str__(self) -> str:
        parts = [self.platform_string()]
        if self.os_version:
            parts.append(f"v{self.os_version}")
        return " ".join(parts)


# platform.system() -> getgo OS name
_OS_NAMES = {
    "windows": "windows",
    "linux": "linux",
    "darwin": "macos",
    "freebsd": "freebsd",
}

# platform.machine() -> getgo architecture name; anything else passes
# through lowercased, which already matches GOARCH for ppc64le, s390x, etc.
_ARCH_NAMES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
}


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """Detect the host platform once per process."""
    return PlatformInfo(
        os=_detect_os(),
        arch=_detect_architecture(),
        os_version=_detect_os_version(),
    )


def _detect_os() -> str:
    """
    Raises:
        RuntimeError: For an operating system Go has no releases for here
    """
    system = platform.system().lower()
    try:
        return _OS_NAMES[system]
    except KeyError:
        raise RuntimeError(f"Unsupported operating system: {system}") from None


def _detect_architecture() -> str:
    machine = platform.machine().lower()
    if machine in _ARCH_NAMES:
        return _ARCH_NAMES[machine]
    if machine.startswith("arm"):
        # armv6l, armv7l, ...
        return "arm"
    return machine


def _detect_os_version() -> str:
    os_name = _OS_NAMES.get(platform.system().lower())
    if os_name == "macos":
        return platform.mac_ver()[0] or "unknown"
    if os_name == "windows":
        return platform.version()
    return platform.release()


def current_shell(
    environ: Optional[Mapping[str, str]] = None,
    info: Optional[PlatformInfo] = None,
) -> str:
    """
    Return the name or path of the user's current shell.

    Uses $SHELL where set (POSIX shells, including Git Bash and MSYS on
    Windows), falling back to %ComSpec% on Windows.

    Args:
        environ: Environment mapping (defaults to os.environ)
        info: PlatformInfo to consult (detected if None)

    Returns:
        Shell path, or an empty string if it cannot be determined
    """
    if environ is None:
        environ = os.environ
    if info is None:
        info = detect_platform()

    shell = environ.get("SHELL", "")
    if shell:
        return shell
    if info.is_windows:
        return environ.get("ComSpec", environ.get("COMSPEC", ""))
    return ""


def clear_platform_cache():
    """Forget the cached detect_platform() result."""
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "current_shell",
    "clear_platform_cache",
]
