"""
Use command implementation.

Resolves a version specifier, installs the version if needed and makes it
the current one.
"""

import logging

from getgo.cli.utils import SETUP_HINT

logger = logging.getLogger(__name__)


def run(args, services) -> int:
    """
    Run the use command.

    Args:
        args: Parsed command-line arguments with:
            - version: specifier (up, latest, update, tip, 1.21, go1.21)
            - changelist: optional changelist for tip

    Returns:
        Exit code (0 for success)
    """
    resolved = services.resolver.resolve(args.version, args.changelist)
    logger.debug(f"Resolved {args.version!r} to {resolved}")

    result = services.installer.ensure_installed(resolved.version, resolved.changelist)
    services.pointer.set_current(resolved.version)

    print(f"{resolved.version}: already set default")
    if result.bootstrapped:
        print(f"{resolved.version}: {SETUP_HINT}")
    return 0
