"""
Setup command implementation.

Persists GOPATH and PATH so the current toolchain is found by new shells.
"""

import logging

from getgo.core.exceptions import SetupDeclined

logger = logging.getLogger(__name__)


def run(args, services) -> int:
    """
    Run the setup command.

    Args:
        args: Parsed command-line arguments with:
            - silent: skip the confirmation prompt

    Returns:
        Exit code (0 for success, including a declined prompt)
    """
    toolchain_bin = services.layout.pointer_binary().parent

    try:
        result = services.profile.setup_gopath(
            toolchain_bin, interactive=not args.silent
        )
    except SetupDeclined as e:
        print(e)
        return 0

    if result.gopath_created:
        print(f"GOPATH set to {result.gopath}")
    else:
        print(f"GOPATH is already set to {result.gopath}")
    for directory in result.path_added:
        print(f"Added {directory} to PATH")

    print(services.profile.session_hint())
    return 0
