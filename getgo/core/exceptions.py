"""
Centralized exception hierarchy for getgo.

Every error raised by the core modules derives from GetgoError so the CLI
dispatcher can report it uniformly and exit non-zero.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class GetgoError(Exception):
    """Base exception for all getgo errors."""

    pass


class ConfigError(GetgoError):
    """Raised when the configuration file cannot be parsed."""

    pass


# ============================================================================
# Catalog Exceptions
# ============================================================================


class CatalogError(GetgoError):
    """Base exception for release catalog errors."""

    pass


class NetworkError(CatalogError):
    """Catalog endpoint unreachable or answered with a non-200 status."""

    pass


class ParseError(CatalogError):
    """Catalog response body is not a valid release list."""

    pass


class NoInstallableReleaseError(CatalogError):
    """The catalog has no stable release installable on this host."""

    pass


# ============================================================================
# Resolution Exceptions
# ============================================================================


class ResolutionError(GetgoError):
    """Base exception for version resolution errors."""

    pass


class UnknownSpecifierError(ResolutionError):
    """Raised when a version specifier cannot be understood."""

    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(f"Unknown version specifier: {specifier!r}")


# ============================================================================
# Installation Exceptions
# ============================================================================


class InstallError(GetgoError):
    """Raised when a version cannot be installed."""

    pass


class DownloadError(InstallError):
    """Raised when an archive download, verification or unpack fails."""

    pass


class ChecksumError(DownloadError):
    """Raised when a downloaded archive does not match its SHA256."""

    pass


# ============================================================================
# Pointer Exceptions
# ============================================================================


class PointerError(GetgoError):
    """Base exception for current-version pointer errors."""

    pass


class GuardError(PointerError):
    """Raised when attempting to remove the current version."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"{version}: can't remove default version")


class VersionNotInstalledError(PointerError):
    """Raised when selecting a version whose directory does not exist."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"{version}: not installed")


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class FilesystemError(GetgoError):
    """Raised when a filesystem operation fails (link, remove, append)."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Environment / Profile Exceptions
# ============================================================================


class ProfileError(GetgoError):
    """Base exception for environment persistence errors."""

    pass


class UnsupportedShellError(ProfileError):
    """Raised when the current shell has no known configuration file."""

    def __init__(self, shell: str):
        self.shell = shell
        super().__init__(f"{shell!r} is not a supported shell")


class PromptCancelledError(GetgoError):
    """Raised when an interactive prompt is cancelled or times out."""

    pass


class SetupDeclined(GetgoError):
    """Raised when the user answers no to the setup prompt."""

    pass


# ============================================================================
# External Commands
# ============================================================================


class CommandError(GetgoError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stderr: Optional[str] = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr or ""
        msg = f"{' '.join(self.command)} exited with status {returncode}"
        if self.stderr.strip():
            msg += f": {self.stderr.strip()}"
        super().__init__(msg)
