"""
External command execution.

The bootstrap toolchain, per-version installer commands and the Windows
environment setter all run through a CommandRunner, which Installer and
ProfileWriter receive as a constructor argument so tests can substitute a
fake.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union

from .exceptions import CommandError

logger = logging.getLogger(__name__)

Command = Sequence[Union[str, "os.PathLike[str]"]]


@dataclass
class CommandResult:
    """Exit status and captured output of a finished command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs external commands synchronously."""

    def run(
        self,
        command: Command,
        env: Optional[Mapping[str, str]] = None,
        capture: bool = True,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """
        Run a command and wait for it to finish.

        Args:
            command: Program and arguments
            env: Extra environment variables, merged over os.environ
            capture: Capture stdout/stderr; if False they stream to the
                terminal (used for long-running downloads)
            timeout: Seconds before the command is killed

        Returns:
            CommandResult; a missing executable yields returncode 127
        """
        argv = [str(part) for part in command]
        full_env = None
        if env:
            full_env = dict(os.environ)
            full_env.update(env)

        logger.debug(f"Running: {' '.join(argv)}")
        try:
            completed = subprocess.run(
                argv,
                env=full_env,
                capture_output=capture,
                text=True,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as e:
            logger.debug(f"Executable not found: {argv[0]}")
            return CommandResult(returncode=127, stderr=str(e))
        except subprocess.TimeoutExpired as e:
            logger.debug(f"Timeout running {argv[0]}")
            return CommandResult(returncode=124, stderr=str(e))

        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def output(
        self,
        command: Command,
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Run a command and return its trimmed stdout.

        Raises:
            CommandError: If the command exits non-zero
        """
        result = self.run(command, env=env, capture=True, timeout=timeout)
        if not result.ok:
            raise CommandError([str(c) for c in command], result.returncode, result.stderr)
        return result.stdout.strip()

    def check(
        self,
        command: Command,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Run a command with output streamed to the terminal.

        The command's own stderr is not captured, so the error only
        carries a message when the command could not be started or timed
        out.

        Raises:
            CommandError: If the command exits non-zero
        """
        result = self.run(command, env=env, capture=False)
        if not result.ok:
            raise CommandError([str(c) for c in command], result.returncode, result.stderr)


__all__ = ["CommandRunner", "CommandResult"]
