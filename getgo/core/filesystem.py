"""
Filesystem helpers for unpacking and deleting Go installs.

- Release archives (.tar.gz on POSIX hosts, .zip on Windows) are checked
  member by member before anything is written, so an archive cannot place
  files outside its destination.
- Version directories are deleted only from inside the sdk/ root.
- Bootstrap downloads are staged in a scratch directory next to the final
  install so the last step is a same-filesystem move.
"""

import os
import shutil
import stat
import sys
import tarfile
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Optional, Union

from .exceptions import ArchiveExtractionError, FilesystemError, InsecureArchiveError

PathLike = Union[str, Path]

TAR_SUFFIXES = (".tar.gz", ".tgz")
ZIP_SUFFIXES = (".zip",)


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    True if path equals parent or lies beneath it (purely lexical).

    Example:
        >>> is_relative_to(Path('/home/u/sdk/go1.21'), Path('/home/u/sdk'))
        True
    """
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


# ============================================================================
# Release archives
# ============================================================================


def _check_members(names: Iterable[str], destination: Path) -> None:
    root = destination.resolve()
    for name in names:
        if not is_relative_to((root / name).resolve(), root):
            raise InsecureArchiveError(
                f"Refusing to unpack '{name}': it would land outside {destination}"
            )


def _unpack_zip(archive_path: Path, destination: Path) -> None:
    with zipfile.ZipFile(archive_path) as zf:
        _check_members(zf.namelist(), destination)
        zf.extractall(destination)


def _unpack_tar(archive_path: Path, destination: Path) -> None:
    with tarfile.open(archive_path, "r:gz") as tar:
        _check_members((m.name for m in tar.getmembers()), destination)
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


def extract_archive(archive_path: PathLike, destination: PathLike) -> None:
    """
    Unpack a release archive into destination, creating it if needed.

    Raises:
        ArchiveExtractionError: Missing file, unknown format or corrupt data
        InsecureArchiveError: A member path escapes destination
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.is_file():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    name = archive_path.name.lower()
    if name.endswith(TAR_SUFFIXES):
        unpack = _unpack_tar
    elif name.endswith(ZIP_SUFFIXES):
        unpack = _unpack_zip
    else:
        raise ArchiveExtractionError(
            f"Unsupported archive format: {archive_path.name} (expected .tar.gz or .zip)"
        )

    destination.mkdir(parents=True, exist_ok=True)
    try:
        unpack(archive_path, destination)
    except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
        raise ArchiveExtractionError(f"Cannot unpack {archive_path.name}: {e}") from e


def move_contents(source: Path, destination: Path) -> None:
    """
    Move every entry of source into destination (created if needed).

    Raises:
        FilesystemError: If an entry cannot be moved
    """
    destination.mkdir(parents=True, exist_ok=True)
    for entry in source.iterdir():
        try:
            shutil.move(str(entry), str(destination / entry.name))
        except OSError as e:
            raise FilesystemError(f"Cannot move {entry} into {destination}: {e}") from e


# ============================================================================
# Deletion and scratch space
# ============================================================================


def _clear_readonly(func, failed_path, _exc):
    # Go's module cache marks files read-only; Windows refuses to delete them
    os.chmod(failed_path, stat.S_IWRITE)
    func(failed_path)


def safe_rmtree(path: PathLike, require_prefix: Optional[PathLike] = None) -> None:
    """
    Delete a directory tree.

    The path is made absolute but not resolved, so a symlink is rejected
    rather than followed into whatever it targets. A missing path is
    ignored.

    Args:
        path: Directory to delete
        require_prefix: If given, path must lie beneath it

    Raises:
        ValueError: If path is outside require_prefix
        FilesystemError: If path is a symlink or file, or deletion fails
    """
    path = Path(path).absolute()

    if require_prefix is not None:
        prefix = Path(require_prefix).absolute()
        if path == prefix or not is_relative_to(path, prefix):
            raise ValueError(f"Refusing to delete '{path}': outside '{prefix}'")

    if path.is_symlink():
        raise FilesystemError(f"Refusing to delete through a link: {path}")
    if not path.exists():
        return
    if not path.is_dir():
        raise FilesystemError(f"Not a directory: {path}")

    try:
        if os.name != "nt":
            shutil.rmtree(path)
        elif sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=_clear_readonly)
        else:
            shutil.rmtree(path, onerror=_clear_readonly)
    except OSError as e:
        raise FilesystemError(f"Cannot delete '{path}': {e}") from e


@contextmanager
def temporary_directory(parent: Optional[Path] = None, prefix: str = "getgo_"):
    """
    Yield a scratch directory that is removed on exit, whatever happens.

    Args:
        parent: Where to create it (created if missing)
        prefix: Directory name prefix
    """
    if parent is not None:
        parent.mkdir(parents=True, exist_ok=True)
    scratch = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    try:
        yield scratch
    finally:
        shutil.rmtree(scratch, ignore_errors=True)


__all__ = [
    "is_relative_to",
    "extract_archive",
    "move_contents",
    "safe_rmtree",
    "temporary_directory",
]
