"""
getgo/toolchain/profile.py

Persistent environment variables for future shell sessions.

On POSIX shells an `export NAME=VALUE` line is appended to the shell's
profile (~/.bash_profile or ~/.zshrc), never twice. On Windows the variable
is written to the user environment through PowerShell; users running a
POSIX shell on Windows also get the profile line.
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, MutableMapping, Optional

from ..core.exceptions import (
    CommandError,
    FilesystemError,
    ProfileError,
    SetupDeclined,
    UnsupportedShellError,
)
from ..core.platform import PlatformInfo, current_shell, detect_platform
from ..core.process import CommandRunner
from ..core.prompt import prompt as default_prompt

logger = logging.getLogger(__name__)

BASH_CONFIG = ".bash_profile"
ZSH_CONFIG = ".zshrc"

SETUP_QUESTION = "Would you like us to setup your GOPATH? Y/n"


@dataclass
class SetupResult:
    """What setup_gopath changed."""

    gopath: str
    gopath_created: bool = False
    path_added: List[str] = field(default_factory=list)


class ProfileWriter:
    """Persists environment variables for the current user."""

    def __init__(
        self,
        home: Path,
        platform: Optional[PlatformInfo] = None,
        runner: Optional[CommandRunner] = None,
        environ: Optional[MutableMapping[str, str]] = None,
        shell: Optional[str] = None,
    ):
        """
        Args:
            home: User home directory holding the shell profiles
            platform: PlatformInfo instance (auto-detected if None)
            runner: External command runner (real subprocesses if None)
            environ: Live environment to update (defaults to os.environ)
            shell: Current shell (detected from the environment if None)
        """
        self.home = Path(home)
        self.platform = platform or detect_platform()
        self.runner = runner or CommandRunner()
        self.environ = environ if environ is not None else os.environ
        self._shell = shell

    @property
    def shell(self) -> str:
        if self._shell is not None:
            return self._shell
        return current_shell(self.environ, self.platform)

    @property
    def line_ending(self) -> str:
        return "\r\n" if self.platform.is_windows else "\n"

    @property
    def path_separator(self) -> str:
        return ";" if self.platform.is_windows else ":"

    def is_shell(self, name: str) -> bool:
        return name in os.path.basename(self.shell).lower()

    def shell_config_file(self) -> Path:
        """
        Profile file for the current shell.

        Raises:
            UnsupportedShellError: For shells other than bash and zsh
        """
        if self.is_shell("bash"):
            return self.home / BASH_CONFIG
        if self.is_shell("zsh"):
            return self.home / ZSH_CONFIG
        raise UnsupportedShellError(self.shell)

    # ------------------------------------------------------------------
    # Profile files
    # ------------------------------------------------------------------

    def contains_line(self, filename: Path, value: str) -> bool:
        """Check whether a file holds value as one complete line."""
        try:
            # Profiles are not always UTF-8
            with open(filename, "r", encoding="utf-8", errors="surrogateescape") as f:
                for line in f:
                    if line.rstrip("\r\n") == value:
                        return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise FilesystemError(f"Cannot read {filename}: {e}") from e
        return False

    def append_line(self, filename: Path, value: str) -> bool:
        """
        Append value as a line unless it is already present.

        Returns:
            True if the file was written

        Raises:
            FilesystemError: If the file cannot be read or written
        """
        logger.info(f"Adding {value!r} to {filename}")

        if self.contains_line(filename, value):
            logger.debug("Line already present, nothing to do")
            return False

        try:
            fd = os.open(filename, os.O_APPEND | os.O_WRONLY | os.O_CREAT, 0o600)
            with os.fdopen(
                fd, "w", encoding="utf-8", errors="surrogateescape", newline=""
            ) as f:
                f.write(self.line_ending + value + self.line_ending)
        except (OSError, UnicodeError) as e:
            raise FilesystemError(f"Cannot append to {filename}: {e}") from e
        return True

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def _persist_windows(self, name: str, value: str) -> None:
        script = f'[Environment]::SetEnvironmentVariable("{name}", "{value}", "User")'
        try:
            self.runner.check(["powershell", "-command", script])
        except CommandError as e:
            raise ProfileError(f"Failed to set {name} in the user environment: {e}") from e

    def persist(self, name: str, value: str, live_value: Optional[str] = None) -> None:
        """
        Persist NAME=VALUE for future sessions and apply it to this process.

        Args:
            name: Variable name (upper-cased)
            value: Value to persist; may reference other variables, e.g. $PATH
            live_value: Value for the running process when it differs from
                the persisted text

        Raises:
            UnsupportedShellError: If the shell has no known profile file
            ProfileError: If the Windows user environment cannot be updated
            FilesystemError: If the profile cannot be written
        """
        name = name.upper()
        live = value if live_value is None else live_value

        if self.platform.is_windows:
            self._persist_windows(name, value)
            if self.is_shell("cmd.exe") or self.is_shell("powershell.exe"):
                self.environ[name] = live
                return
            # POSIX shell on Windows: also write its profile

        rc = self.shell_config_file()
        self.append_line(rc, f"export {name}={value}")
        self.environ[name] = live

    def is_in_path(self, directory: str) -> bool:
        """Check membership of directory in the current PATH value."""
        entries = self.environ.get("PATH", "").split(self.path_separator)
        return str(directory) in entries

    def append_to_path(self, directory: str) -> bool:
        """
        Add a directory to PATH for future sessions.

        Returns:
            False if the directory was already on PATH
        """
        directory = str(directory)
        if self.is_in_path(directory):
            logger.debug(f"{directory} already on PATH")
            return False

        current = self.environ.get("PATH", "")
        base = current if self.platform.is_windows else "$PATH"
        live = f"{current}{self.path_separator}{directory}" if current else directory
        self.persist("PATH", f"{base}{self.path_separator}{directory}", live_value=live)
        return True

    # ------------------------------------------------------------------
    # GOPATH setup
    # ------------------------------------------------------------------

    def setup_gopath(
        self,
        toolchain_bin: Path,
        interactive: bool = True,
        cancel: Optional[threading.Event] = None,
        ask: Callable[..., str] = default_prompt,
    ) -> SetupResult:
        """
        Configure GOPATH and PATH for the managed toolchain.

        Args:
            toolchain_bin: bin/ directory reached through the current pointer
            interactive: Ask for confirmation first
            cancel: Event aborting the confirmation prompt
            ask: Prompt function (injectable for tests)

        Raises:
            SetupDeclined: If the user does not answer 'y'
            PromptCancelledError: If the prompt is cancelled
        """
        answer = ask(SETUP_QUESTION, "Y", interactive=interactive, cancel=cancel)
        if answer.strip().lower() != "y":
            raise SetupDeclined("Exiting and not setting up GOPATH.")

        logger.info("Setting up GOPATH")
        gopath = self.environ.get("GOPATH", "")
        result = SetupResult(gopath=gopath)
        if not gopath:
            gopath = str(self.home / "go")
            self.persist("GOPATH", gopath)
            result.gopath = gopath
            result.gopath_created = True
            logger.info("GOPATH has been set up!")
        else:
            logger.info(f"GOPATH is already set to {gopath}")

        gopath_bin = str(Path(gopath.split(self.path_separator)[0]) / "bin")
        for directory in (str(toolchain_bin), gopath_bin):
            if self.append_to_path(directory):
                result.path_added.append(directory)

        return result

    def session_hint(self) -> str:
        """How to load the persisted changes into the running shell."""
        if self.platform.is_windows and (
            self.is_shell("cmd.exe") or self.is_shell("powershell.exe")
        ):
            return (
                "One more thing! Open a new console window to pick up "
                "the new environment variables."
            )
        try:
            rc = self.shell_config_file()
        except UnsupportedShellError:
            return "Open a new shell to pick up the new environment variables."
        return (
            f"One more thing! Run `source {rc}` to persist the new environment "
            "variables to your current session, or open a new shell prompt."
        )


__all__ = ["ProfileWriter", "SetupResult", "SETUP_QUESTION", "BASH_CONFIG", "ZSH_CONFIG"]
