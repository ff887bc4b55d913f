"""
Remove command implementation.

Deletes an installed version; the current version is refused.
"""

import logging

from getgo.toolchain.resolver import canonical_version

logger = logging.getLogger(__name__)


def run(args, services) -> int:
    """
    Run the remove command.

    Returns:
        Exit code (0 for success); GuardError propagates to the dispatcher
    """
    version = canonical_version(args.version)
    services.pointer.remove(version)
    print(f"{version}: removed")
    return 0
