"""
getgo/toolchain/pointer.py

The current-version pointer.

<home>/sdk/go is a symlink (a directory junction on Windows when symlinks
are not permitted) to exactly one installed version directory, or absent.
Every read and write of that link goes through CurrentPointer.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from ..core.directory import SdkLayout
from ..core.exceptions import FilesystemError, GuardError, VersionNotInstalledError
from ..core.filesystem import safe_rmtree

logger = logging.getLogger(__name__)


def _strip_unc_prefix(target: str) -> str:
    """Remove the '\\\\?\\' prefix Windows adds to junction targets."""
    for prefix in ("\\\\?\\", "//?/"):
        if target.startswith(prefix):
            return target[len(prefix):]
    return target


def _same_path(a: Path, b: Path) -> bool:
    return os.path.normcase(os.path.normpath(str(a))) == os.path.normcase(
        os.path.normpath(str(b))
    )


class CurrentPointer:
    """Owns the <home>/sdk/go link and the guarded removal of versions."""

    def __init__(self, layout: SdkLayout):
        self.layout = layout
        self._use_junctions = layout.platform.is_windows

    @property
    def path(self) -> Path:
        return self.layout.pointer_path

    def target(self) -> Optional[Path]:
        """
        Read the pointer's target.

        Returns:
            Absolute target path, or None if the pointer does not exist

        Raises:
            FilesystemError: If the pointer exists but cannot be read as a link
        """
        try:
            raw = os.readlink(self.path)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise FilesystemError(f"Cannot read current pointer {self.path}: {e}") from e

        target = Path(_strip_unc_prefix(raw))
        if not target.is_absolute():
            target = self.path.parent / target
        return target

    def current_version(self) -> Optional[str]:
        """Name of the version the pointer targets, or None."""
        target = self.target()
        return target.name if target is not None else None

    def is_current(self, version: str) -> bool:
        """
        Check whether the pointer targets the given version's directory.

        A missing pointer is not an error; it simply means no version is
        current.
        """
        target = self.target()
        if target is None:
            return False
        return _same_path(target, self.layout.version_root(version))

    def set_current(self, version: str) -> Path:
        """
        Point <home>/sdk/go at the given installed version.

        Returns:
            Path of the pointer

        Raises:
            VersionNotInstalledError: If the version directory does not exist
            FilesystemError: If the link cannot be created
        """
        target = self.layout.version_root(version)
        if not self.layout.is_installed(version):
            raise VersionNotInstalledError(version)

        self.layout.ensure_sdk_root()

        if self._use_junctions:
            self._replace_windows(target)
        else:
            self._replace_posix(target)

        logger.info(f"Current version set: {self.path} -> {target}")
        return self.path

    def _replace_posix(self, target: Path) -> None:
        # Build the new link beside the pointer, then rename it into place
        staging = self.path.with_name(f".{self.path.name}.{os.getpid()}.tmp")
        try:
            if staging.is_symlink() or staging.exists():
                staging.unlink()
            os.symlink(target, staging, target_is_directory=True)
            os.replace(staging, self.path)
        except OSError as e:
            try:
                staging.unlink()
            except OSError:
                pass
            raise FilesystemError(
                f"Failed to link {self.path} -> {target}: {e}"
            ) from e

    def _replace_windows(self, target: Path) -> None:
        # No atomic rename over a directory link on Windows: remove, then create
        try:
            os.rmdir(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise FilesystemError(f"Failed to remove {self.path}: {e}") from e

        try:
            os.symlink(target, self.path, target_is_directory=True)
            return
        except OSError as e:
            logger.debug(f"Symlink not permitted ({e}), creating junction")

        try:
            import _winapi

            _winapi.CreateJunction(str(target), str(self.path))  # type: ignore[attr-defined]
        except OSError as e:
            raise FilesystemError(
                f"Failed to create junction {self.path} -> {target}: {e}"
            ) from e

    def remove(self, version: str) -> None:
        """
        Delete an installed version.

        The current version is never removed.

        Raises:
            GuardError: If the version is current
            FilesystemError: If deletion fails
        """
        if self.is_current(version):
            raise GuardError(version)

        version_root = self.layout.version_root(version)
        if not version_root.exists():
            logger.info(f"{version}: not installed, nothing to remove")
            return

        safe_rmtree(version_root, require_prefix=self.layout.sdk_root)
        logger.info(f"Removed {version_root}")


__all__ = ["CurrentPointer"]
