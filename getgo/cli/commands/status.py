"""
Status command implementation.

Shows the toolchain found on PATH; bootstraps the latest release when there
is none.
"""

import logging

from getgo.cli.utils import SETUP_HINT

logger = logging.getLogger(__name__)


def run(args, services) -> int:
    """
    Run the status command.

    Args:
        args: Parsed command-line arguments
        services: Shared CLI services

    Returns:
        Exit code (0 for success)
    """
    installer = services.installer

    gobin = installer.find_toolchain()
    if gobin is None:
        logger.debug("No go on PATH, bootstrapping")
        _, version = installer.bootstrap()
        services.pointer.set_current(version)
        print(f"{version}: {SETUP_HINT}")
        return 0

    banner, goroot = installer.describe(gobin)
    print(f"{banner} ({goroot})")
    return 0
