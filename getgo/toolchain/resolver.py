"""
getgo/toolchain/resolver.py

Maps user-supplied version specifiers to canonical version identifiers.

Specifiers:
    up, latest, update  -> newest stable release installable on this host
    tip, gotip [CL]     -> 'gotip', optionally pinned to a changelist
    1.21.5, go1.21.5    -> 'go1.21.5' (not checked against the catalog)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import NoInstallableReleaseError, UnknownSpecifierError
from .catalog import CatalogFetcher

logger = logging.getLogger(__name__)

VERSION_PREFIX = "go"
TIP_VERSION = "gotip"
LATEST_ALIASES = ("up", "latest", "update")
TIP_ALIASES = ("tip", "gotip")


def normalize_version(specifier: str) -> str:
    """
    Normalize a version to its canonical 'go'-prefixed form.

    Idempotent: normalize_version(normalize_version(v)) == normalize_version(v).

    Example:
        >>> normalize_version("1.21.5")
        'go1.21.5'
        >>> normalize_version("go1.21.5")
        'go1.21.5'
    """
    version = specifier.strip().lower()
    if not version.startswith(VERSION_PREFIX):
        version = VERSION_PREFIX + version
    return version


def canonical_version(specifier: str) -> str:
    """
    Normalize an explicit version, rejecting values that are not a single
    version directory name under sdk/.

    Raises:
        UnknownSpecifierError: If the specifier is empty, names the
            pointer itself, or contains a path separator
    """
    spec = specifier.strip()
    if not spec or "/" in spec or "\\" in spec:
        raise UnknownSpecifierError(specifier)
    version = normalize_version(spec)
    if version == VERSION_PREFIX:
        raise UnknownSpecifierError(specifier)
    return version


@dataclass(frozen=True)
class ResolvedVersion:
    """Canonical version plus the changelist for tip builds."""

    version: str
    changelist: Optional[str] = None

    @property
    def is_tip(self) -> bool:
        return self.version == TIP_VERSION

    def __str__(self) -> str:
        if self.changelist:
            return f"{self.version} (CL {self.changelist})"
        return self.version


class VersionResolver:
    """Resolves specifiers, consulting the catalog only for 'latest' aliases."""

    def __init__(self, catalog: CatalogFetcher):
        self.catalog = catalog

    def latest(self) -> str:
        """
        Return the newest stable release installable on this host.

        Raises:
            NetworkError, ParseError: If the catalog cannot be fetched
            NoInstallableReleaseError: If no stable release matches the host
        """
        entries = self.catalog.list_installable()
        if not entries:
            raise NoInstallableReleaseError(
                f"no stable release available for {self.catalog.platform.platform_string()}"
            )
        return entries[0].version

    def resolve(self, specifier: str, changelist: Optional[str] = None) -> ResolvedVersion:
        """
        Resolve a specifier to a canonical version.

        Args:
            specifier: Alias, tip marker, or explicit version
            changelist: Optional changelist; only meaningful for tip

        Returns:
            ResolvedVersion

        Raises:
            UnknownSpecifierError: If the specifier is empty or contains a
                path separator
        """
        version = canonical_version(specifier)
        spec = specifier.strip().lower()

        if spec in LATEST_ALIASES:
            version = normalize_version(self.latest())
            logger.debug(f"Resolved {specifier!r} to {version}")
            return ResolvedVersion(version)

        if spec in TIP_ALIASES:
            return ResolvedVersion(TIP_VERSION, changelist or None)

        if changelist:
            logger.debug(f"Ignoring changelist {changelist!r} for non-tip version {spec}")
        return ResolvedVersion(version)


__all__ = [
    "normalize_version",
    "canonical_version",
    "ResolvedVersion",
    "VersionResolver",
    "TIP_VERSION",
    "LATEST_ALIASES",
    "TIP_ALIASES",
]
