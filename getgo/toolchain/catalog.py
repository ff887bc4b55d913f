"""
getgo/toolchain/catalog.py

Release catalog retrieval and platform filtering.

The catalog is a JSON array published by the Go download site:

    [
      {
        "version": "go1.21.5",
        "stable": true,
        "files": [
          {"filename": "go1.21.5.linux-amd64.tar.gz", "os": "linux",
           "arch": "amd64", "version": "go1.21.5", "sha256": "e2bc...",
           "size": 66618285, "kind": "archive"},
          ...
        ]
      },
      ...
    ]

Releases are fetched fresh on every query; nothing is cached.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import RequestException

from ..core.exceptions import NetworkError, ParseError
from ..core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveEntry:
    """One downloadable file of a release for a given platform and packaging."""

    filename: str
    os: str
    arch: str
    version: str
    sha256: str
    size: int
    kind: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArchiveEntry":
        if not isinstance(data, dict):
            raise ParseError(f"version json parse failed: file entry is not an object: {data!r}")
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError) as e:
            raise ParseError(f"version json parse failed: bad size {data.get('size')!r}") from e
        return cls(
            filename=str(data.get("filename", "")),
            os=str(data.get("os", "")),
            arch=str(data.get("arch", "")),
            version=str(data.get("version", "")),
            sha256=str(data.get("sha256", "")),
            size=size,
            kind=str(data.get("kind", "")),
        )


@dataclass(frozen=True)
class ReleaseEntry:
    """One published release and its archives."""

    version: str
    stable: bool
    files: List[ArchiveEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReleaseEntry":
        if not isinstance(data, dict):
            raise ParseError(f"version json parse failed: release is not an object: {data!r}")
        files = data.get("files") or []
        if not isinstance(files, list):
            raise ParseError("version json parse failed: 'files' is not a list")
        return cls(
            version=str(data.get("version", "")),
            stable=bool(data.get("stable", False)),
            files=[ArchiveEntry.from_dict(f) for f in files],
        )


def is_installable(entry: ArchiveEntry, platform: Optional[PlatformInfo] = None) -> bool:
    """
    Check whether an archive can be installed on the host.

    True iff os/arch match the host (Linux arm is published as 'armv6l'),
    the kind is 'archive', and a SHA256 is present.
    """
    if platform is None:
        platform = detect_platform()
    return (
        entry.os == platform.archive_os()
        and entry.arch == platform.archive_arch()
        and entry.kind == "archive"
        and entry.sha256 != ""
    )


class CatalogFetcher:
    """Fetches published releases and filters them for the host platform."""

    def __init__(
        self,
        url: str,
        timeout: int = 30,
        platform: Optional[PlatformInfo] = None,
    ):
        """
        Args:
            url: JSON catalog endpoint
            timeout: HTTP timeout in seconds
            platform: PlatformInfo instance (auto-detected if None)
        """
        self.url = url
        self.timeout = timeout
        self.platform = platform or detect_platform()

    def fetch(self) -> List[ReleaseEntry]:
        """
        Retrieve the release list with a single GET request.

        Returns:
            Releases in server order

        Raises:
            NetworkError: If the request fails or the status is not 200
            ParseError: If the body is not a JSON array of releases
        """
        logger.debug(f"Fetching release catalog: {self.url}")
        try:
            response = requests.get(self.url, timeout=self.timeout)
        except RequestException as e:
            raise NetworkError(f"http request failed: {self.url}: {e}") from e

        if response.status_code != 200:
            raise NetworkError(
                f"http request failed: {response.status_code} {self.url}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"version json parse failed: {e}") from e

        if not isinstance(data, list):
            raise ParseError("version json parse failed: expected a JSON array")

        releases = [ReleaseEntry.from_dict(item) for item in data]
        logger.debug(f"Catalog lists {len(releases)} releases")
        return releases

    def filter_installable(self, releases: List[ReleaseEntry]) -> List[ArchiveEntry]:
        """
        Keep installable archives of stable releases, in server order.
        """
        return [
            entry
            for release in releases
            if release.stable
            for entry in release.files
            if is_installable(entry, self.platform)
        ]

    def list_installable(self) -> List[ArchiveEntry]:
        """Fetch the catalog and filter it for this host."""
        return self.filter_installable(self.fetch())


__all__ = ["ArchiveEntry", "ReleaseEntry", "CatalogFetcher", "is_installable"]
