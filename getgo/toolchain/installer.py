"""
getgo/toolchain/installer.py

Ensures Go versions are present under <home>/sdk.

Normal versions are installed through the per-version wrapper commands
published at golang.org/dl: an existing toolchain builds the wrapper
(`go install golang.org/dl/go1.21.5@latest`), then `go1.21.5 download`
fetches, verifies and unpacks the release.

When no toolchain exists at all, bootstrap() downloads the newest stable
archive straight from the catalog and unpacks it, so the wrapper mechanism
has a compiler to run on.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..core.config import GetgoConfig
from ..core.directory import SdkLayout, TOOL_NAME
from ..core.download import DownloadProgress, download_file, format_progress
from ..core.exceptions import (
    ArchiveExtractionError,
    CommandError,
    DownloadError,
    InstallError,
    NoInstallableReleaseError,
)
from ..core.filesystem import (
    extract_archive,
    move_contents,
    safe_rmtree,
    temporary_directory,
)
from ..core.process import CommandRunner
from .catalog import ArchiveEntry, CatalogFetcher

logger = logging.getLogger(__name__)

DL_MODULE = "golang.org/dl"
UNPACKED_MARKER = ".unpacked-success"


@dataclass
class InstallResult:
    """Result of an ensure_installed call."""

    version: str
    entrypoint: Path
    already_installed: bool = False
    bootstrapped: bool = False


def _log_progress(progress: DownloadProgress) -> None:
    logger.info(f"  {format_progress(progress)}")


class Installer:
    """Installs Go versions, bootstrapping a first toolchain when needed."""

    def __init__(
        self,
        layout: SdkLayout,
        catalog: CatalogFetcher,
        config: Optional[GetgoConfig] = None,
        runner: Optional[CommandRunner] = None,
    ):
        """
        Args:
            layout: sdk/ directory layout
            catalog: Release catalog (used by bootstrap)
            config: Effective configuration (defaults if None)
            runner: External command runner (real subprocesses if None)
        """
        self.layout = layout
        self.catalog = catalog
        self.config = config or GetgoConfig()
        self.runner = runner or CommandRunner()
        self.platform = layout.platform

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def find_toolchain(self) -> Optional[Path]:
        """Locate a go executable on PATH."""
        found = shutil.which(TOOL_NAME)
        return Path(found) if found else None

    def is_runnable(self, version: str) -> bool:
        """Check a version by running its go binary with 'version'."""
        binary = self.layout.toolchain_binary(version)
        if not binary.is_file():
            return False
        return self.runner.run([binary, "version"]).ok

    def describe(self, gobin: Path) -> Tuple[str, str]:
        """
        Report a toolchain's version banner and GOROOT.

        Raises:
            CommandError: If the toolchain cannot be run
        """
        version = self.runner.output([gobin, "version"])
        goroot = self.runner.output([gobin, "env", "GOROOT"])
        return version, goroot

    def gobin_path(self, gobin: Optional[Path]) -> Path:
        """
        Directory where `go install` places binaries for this toolchain.

        GOBIN if set, else GOPATH/bin, else <home>/go/bin.
        """
        default = self.layout.home / "go" / "bin"
        if gobin is None:
            return default

        bin_path = self._go_env(gobin, "GOBIN")
        if bin_path:
            return Path(bin_path)
        go_path = self._go_env(gobin, "GOPATH")
        if go_path:
            # GOPATH may be a list; go install uses the first entry
            return Path(go_path.split(self._path_separator())[0]) / "bin"
        return default

    def _go_env(self, gobin: Path, name: str) -> str:
        # Same environment as the install, so HOME-derived defaults agree
        result = self.runner.run([gobin, "env", name], env=self._install_env())
        return result.stdout.strip() if result.ok else ""

    def _path_separator(self) -> str:
        return ";" if self.platform.is_windows else ":"

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    def bootstrap(self) -> Tuple[Path, str]:
        """
        Install the newest stable release without an existing toolchain.

        Returns:
            (path to its go binary, canonical version)

        Raises:
            NetworkError, ParseError: If the catalog cannot be fetched
            NoInstallableReleaseError: If no release matches this host
            DownloadError: If download, verification or unpacking fails
        """
        entries = self.catalog.list_installable()
        if not entries:
            raise NoInstallableReleaseError(
                f"no stable release available for {self.platform.platform_string()}"
            )
        entry = entries[0]
        version = entry.version
        logger.info(f"Bootstrapping {version}")

        if self.is_runnable(version):
            logger.info(f"{version}: already downloaded")
        else:
            try:
                self.install_archive(entry)
            except DownloadError as e:
                raise DownloadError(f"bootstrap {version}: download failed: {e}") from e

        return self.layout.toolchain_binary(version), version

    def install_archive(self, entry: ArchiveEntry) -> Path:
        """
        Download, verify and unpack a release archive into <sdk>/<version>.

        The archive's top-level 'go/' directory becomes the version root.

        Raises:
            DownloadError: On any download, checksum or extraction failure
        """
        version_root = self.layout.version_root(entry.version)
        url = self.config.download_url.rstrip("/") + "/" + entry.filename
        self.layout.ensure_sdk_root()

        with temporary_directory(parent=self.layout.sdk_root) as staging:
            archive = download_file(
                url,
                staging / entry.filename,
                expected_sha256=entry.sha256,
                progress_callback=_log_progress,
                timeout=self.config.request_timeout,
            )
            unpacked = staging / "unpacked"
            try:
                extract_archive(archive, unpacked)
            except ArchiveExtractionError as e:
                raise DownloadError(str(e)) from e

            source = unpacked / "go" if (unpacked / "go").is_dir() else unpacked

            if version_root.exists():
                logger.warning(f"Replacing incomplete install at {version_root}")
                safe_rmtree(version_root, require_prefix=self.layout.sdk_root)
            move_contents(source, version_root)

        (version_root / UNPACKED_MARKER).touch()
        logger.info(f"Unpacked {entry.filename} to {version_root}")
        return version_root

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def _install_env(self) -> Dict[str, str]:
        env = {
            "GO111MODULE": "on",
            "GOPROXY": self.config.module_proxy,
        }
        # The golang.org/dl wrappers install into $HOME/sdk
        if self.platform.is_windows:
            env["USERPROFILE"] = str(self.layout.home)
        else:
            env["HOME"] = str(self.layout.home)
        return env

    def ensure_installed(
        self, version: str, changelist: Optional[str] = None
    ) -> InstallResult:
        """
        Make sure a canonical version is installed.

        Already-runnable versions are left alone unless a changelist is
        requested, in which case the tip build is always refreshed.

        Args:
            version: Canonical version (e.g. 'go1.21.5', 'gotip')
            changelist: Optional changelist for tip builds

        Returns:
            InstallResult with the path of the version's go binary

        Raises:
            DownloadError: If bootstrapping fails
            InstallError: If the wrapper cannot be built or its download fails
        """
        bootstrapped = False
        gobin = self.find_toolchain()
        if gobin is None:
            gobin, _ = self.bootstrap()
            bootstrapped = True

        entrypoint = self.layout.toolchain_binary(version)

        if not changelist and self.is_runnable(version):
            logger.info(f"{version}: already downloaded")
            return InstallResult(version, entrypoint, True, bootstrapped)

        env = self._install_env()
        try:
            self.runner.check([gobin, "install", f"{DL_MODULE}/{version}@latest"], env=env)
        except CommandError as e:
            raise InstallError(f"{version}: {e}") from e

        wrapper = self.gobin_path(gobin) / self.platform.executable_name(version)
        command = [wrapper, "download"]
        if changelist:
            command.append(changelist)
        try:
            self.runner.check(command, env=env)
        except CommandError as e:
            raise InstallError(f"{version}: {e}") from e

        if not entrypoint.is_file():
            raise InstallError(f"{version}: {entrypoint} missing after download")

        return InstallResult(version, entrypoint, False, bootstrapped)


__all__ = ["Installer", "InstallResult", "DL_MODULE", "UNPACKED_MARKER"]
