"""
Core functionality for getgo.

This package contains the foundational modules that the toolchain modules
depend on: platform detection, configuration, the sdk/ layout, external
command execution, downloads, filesystem helpers and prompts.
"""

from .config import GetgoConfig, load_config
from .directory import SdkLayout
from .platform import PlatformInfo, detect_platform, current_shell, clear_platform_cache
from .process import CommandRunner, CommandResult

from .exceptions import (
    GetgoError,
    ConfigError,
    CatalogError,
    NetworkError,
    ParseError,
    NoInstallableReleaseError,
    ResolutionError,
    UnknownSpecifierError,
    InstallError,
    DownloadError,
    ChecksumError,
    PointerError,
    GuardError,
    VersionNotInstalledError,
    FilesystemError,
    ArchiveExtractionError,
    InsecureArchiveError,
    ProfileError,
    UnsupportedShellError,
    PromptCancelledError,
    SetupDeclined,
    CommandError,
)

__all__ = [
    "GetgoConfig",
    "load_config",
    "SdkLayout",
    "PlatformInfo",
    "detect_platform",
    "current_shell",
    "clear_platform_cache",
    "CommandRunner",
    "CommandResult",
    "GetgoError",
    "ConfigError",
    "CatalogError",
    "NetworkError",
    "ParseError",
    "NoInstallableReleaseError",
    "ResolutionError",
    "UnknownSpecifierError",
    "InstallError",
    "DownloadError",
    "ChecksumError",
    "PointerError",
    "GuardError",
    "VersionNotInstalledError",
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "ProfileError",
    "UnsupportedShellError",
    "PromptCancelledError",
    "SetupDeclined",
    "CommandError",
]
