"""
Interactive prompts that can be cancelled.

The stdin read runs on a daemon thread while the caller waits for whichever
comes first: the answer, the cancel event, or the deadline. A cancelled
prompt raises PromptCancelledError rather than falling back to the default.
"""

import logging
import queue
import sys
import threading
import time
from typing import Optional, TextIO, Tuple

from .exceptions import PromptCancelledError

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05


def prompt(
    query: str,
    default_answer: str,
    interactive: bool = True,
    cancel: Optional[threading.Event] = None,
    timeout: Optional[float] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> str:
    """
    Ask a question on stdout and read one line from stdin.

    Args:
        query: Question text
        default_answer: Returned for an empty answer, and returned
            immediately when not interactive
        interactive: If False, skip the prompt entirely
        cancel: Event that aborts the prompt when set
        timeout: Seconds to wait before giving up
        stdin: Input stream (defaults to sys.stdin)
        stdout: Output stream (defaults to sys.stdout)

    Returns:
        The answer, or default_answer for an empty line

    Raises:
        PromptCancelledError: If cancelled, timed out, or stdin is closed
    """
    if not interactive:
        return default_answer

    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    stdout.write(f"{query} [{default_answer}]: ")
    stdout.flush()

    results: "queue.Queue[Tuple[Optional[str], Optional[BaseException]]]" = queue.Queue(
        maxsize=1
    )

    def read_line():
        try:
            line = stdin.readline()
        except (OSError, ValueError) as e:
            results.put((None, e))
            return
        if not line:
            results.put((None, EOFError("end of input")))
            return
        results.put((line.rstrip("\r\n"), None))

    reader = threading.Thread(target=read_line, name="getgo-prompt", daemon=True)
    reader.start()

    deadline = time.monotonic() + timeout if timeout is not None else None
    while True:
        if cancel is not None and cancel.is_set():
            raise PromptCancelledError("prompt cancelled")
        wait = _POLL_INTERVAL
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise PromptCancelledError(f"no answer within {timeout}s")
            wait = min(wait, remaining)
        try:
            answer, error = results.get(timeout=wait)
        except queue.Empty:
            continue
        break

    if error is not None:
        raise PromptCancelledError(f"cannot read answer: {error}") from error

    if answer == "":
        answer = default_answer
    logger.debug(f"Prompt answer: {answer!r}")
    return answer


__all__ = ["prompt"]
