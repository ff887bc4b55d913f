"""
Filesystem layout of installed Go versions.

Directory Structure (<home>/sdk/):
    - go1.21.5/       : one directory per installed version
    - gotip/          : tip build, if installed
    - go              : symlink to the current version's directory

Installation state is derived entirely from directory existence; no
manifest is kept.
"""

from pathlib import Path
from typing import List, Optional

from .platform import PlatformInfo, detect_platform

SDK_DIR_NAME = "sdk"
POINTER_NAME = "go"
TOOL_NAME = "go"


class SdkLayout:
    """Resolves paths under <home>/sdk for canonical versions."""

    def __init__(self, home: Path, platform: Optional[PlatformInfo] = None):
        """
        Args:
            home: Directory containing sdk/ (usually the user's home)
            platform: PlatformInfo instance (auto-detected if None)
        """
        self.home = Path(home)
        self.platform = platform or detect_platform()

    @property
    def sdk_root(self) -> Path:
        return self.home / SDK_DIR_NAME

    @property
    def pointer_path(self) -> Path:
        """Path of the current-version symlink."""
        return self.sdk_root / POINTER_NAME

    def version_root(self, version: str) -> Path:
        """
        Install directory for a canonical version.

        Example:
            >>> SdkLayout(Path('/home/u')).version_root('go1.21.5')
            PosixPath('/home/u/sdk/go1.21.5')
        """
        if not version or version == POINTER_NAME:
            raise ValueError(f"Invalid version directory name: {version!r}")
        return self.sdk_root / version

    def toolchain_binary(self, version: str) -> Path:
        """Path of the go executable inside a version's install directory."""
        return (
            self.version_root(version)
            / "bin"
            / self.platform.executable_name(TOOL_NAME)
        )

    def pointer_binary(self) -> Path:
        """Path of the go executable reached through the current pointer."""
        return self.pointer_path / "bin" / self.platform.executable_name(TOOL_NAME)

    def is_installed(self, version: str) -> bool:
        return self.version_root(version).is_dir()

    def list_installed(self) -> List[str]:
        """
        List installed versions (directories matching 'go?*').

        The current pointer itself is named exactly 'go' and is never listed.
        """
        if not self.sdk_root.is_dir():
            return []
        return sorted(
            p.name
            for p in self.sdk_root.glob("go?*")
            if p.is_dir() and not p.is_symlink()
        )

    def ensure_sdk_root(self) -> Path:
        self.sdk_root.mkdir(parents=True, exist_ok=True)
        return self.sdk_root


__all__ = ["SdkLayout", "SDK_DIR_NAME", "POINTER_NAME", "TOOL_NAME"]
