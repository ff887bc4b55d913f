"""
Toolchain management module for getgo.

This module provides functionality for:
- Release catalog retrieval and platform filtering
- Version specifier resolution
- Installation and first-run bootstrap
- The current-version pointer
- Persisting environment variables for the toolchain
"""

from getgo.toolchain.catalog import (
    ArchiveEntry,
    ReleaseEntry,
    CatalogFetcher,
    is_installable,
)
from getgo.toolchain.resolver import (
    ResolvedVersion,
    VersionResolver,
    normalize_version,
    canonical_version,
    TIP_VERSION,
)
from getgo.toolchain.installer import Installer, InstallResult
from getgo.toolchain.pointer import CurrentPointer
from getgo.toolchain.profile import ProfileWriter, SetupResult

__all__ = [
    "ArchiveEntry",
    "ReleaseEntry",
    "CatalogFetcher",
    "is_installable",
    "ResolvedVersion",
    "VersionResolver",
    "normalize_version",
    "canonical_version",
    "TIP_VERSION",
    "Installer",
    "InstallResult",
    "CurrentPointer",
    "ProfileWriter",
    "SetupResult",
]
