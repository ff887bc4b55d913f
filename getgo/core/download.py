"""
Release archive downloads.

Only the bootstrap path downloads directly; every other install goes through
the golang.org/dl wrappers. An archive is streamed to disk in one attempt,
hashed as it arrives and compared against the catalog's SHA256 before
anyone unpacks it.
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from .exceptions import ChecksumError, DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
PROGRESS_INTERVAL = 0.5  # seconds between progress callbacks


@dataclass
class DownloadProgress:
    """Snapshot passed to progress callbacks."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float
    eta_seconds: float

    def __str__(self) -> str:
        return format_progress(self)


class StreamingHasher:
    """SHA256 over a stream of chunks."""

    def __init__(self):
        self.hasher = hashlib.sha256()

    def update(self, data: bytes):
        self.hasher.update(data)

    def finalize(self) -> str:
        return self.hasher.hexdigest()

    def verify(self, expected_hash: str) -> bool:
        return self.finalize() == expected_hash.lower()


def _progress(downloaded: int, total: int, started: float) -> DownloadProgress:
    elapsed = time.monotonic() - started
    speed = downloaded / elapsed if elapsed > 0 else 0.0
    if total > 0:
        percentage = downloaded * 100.0 / total
        eta = (total - downloaded) / speed if speed > 0 else 0.0
    else:
        total, percentage, eta = downloaded, 0.0, 0.0
    return DownloadProgress(downloaded, total, percentage, speed, eta)


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
) -> Path:
    """
    Stream url to destination, checking its SHA256 if one is given.

    Args:
        url: Archive URL
        destination: File to write (parent directories are created)
        expected_sha256: Hex digest from the release catalog
        progress_callback: Called at most twice a second, and once at the end
        timeout: Connect/read timeout in seconds

    Returns:
        destination

    Raises:
        ValueError: If url or destination is empty
        DownloadError: If the request fails, the status is not 2xx, or the
            file cannot be written
        ChecksumError: If the digest does not match (the file is deleted)

    Example:
        >>> download_file(
        ...     "https://dl.google.com/go/go1.21.5.linux-amd64.tar.gz",
        ...     Path("/tmp/go1.21.5.linux-amd64.tar.gz"),
        ...     expected_sha256="e2bc0b3e...",
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")
    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Downloading {url}")

    try:
        response = requests.get(url, stream=True, timeout=timeout)
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(f"Download failed: {url}: {e}") from e

    total = int(response.headers.get("content-length") or 0)
    hasher = StreamingHasher()
    downloaded = 0
    started = last_report = time.monotonic()

    try:
        with open(destination, "wb") as out:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                out.write(chunk)
                hasher.update(chunk)
                downloaded += len(chunk)

                if progress_callback is None:
                    continue
                now = time.monotonic()
                if now - last_report >= PROGRESS_INTERVAL or downloaded == total:
                    progress_callback(_progress(downloaded, total, started))
                    last_report = now
    except (RequestException, OSError) as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Download of {url} interrupted: {e}") from e

    if expected_sha256 and not hasher.verify(expected_sha256):
        destination.unlink()
        raise ChecksumError(
            f"Checksum mismatch for {destination.name}: "
            f"expected {expected_sha256}, got {hasher.finalize()}"
        )

    logger.debug(f"Saved {downloaded} bytes to {destination}")
    return destination


def format_progress(progress: DownloadProgress) -> str:
    """
    Human-readable progress line.

    Example:
        >>> format_progress(DownloadProgress(52428800, 104857600, 50.0, 1048576, 50))
        '50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s'
    """
    mib = 1024 * 1024
    done = progress.bytes_downloaded / mib
    speed = progress.speed_bps / mib
    if progress.total_bytes <= 0:
        return f"{done:.1f} MB at {speed:.1f} MB/s"
    return (
        f"{done:.1f}/{progress.total_bytes / mib:.1f} MB "
        f"({progress.percentage:.1f}%) at {speed:.1f} MB/s "
        f"ETA: {progress.eta_seconds:.0f}s"
    )


__all__ = [
    "DownloadProgress",
    "StreamingHasher",
    "download_file",
    "format_progress",
]
