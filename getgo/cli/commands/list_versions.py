"""
List command implementation.

Markers:
    *  installed and current
    +  installed
       available (only with 'all')
"""

import logging

logger = logging.getLogger(__name__)


def _marker(version: str, installed: set, current) -> str:
    if version not in installed:
        return " "
    return "*" if version == current else "+"


def run(args, services) -> int:
    """
    Run the list command.

    Stable catalog releases come first, in catalog order, followed by
    installed versions the catalog does not list (e.g. gotip).

    Returns:
        Exit code (0 for success)
    """
    show_all = bool(args.all or args.scope == "all")

    installed = set(services.layout.list_installed())
    current = services.pointer.current_version()

    seen = set()
    for entry in services.catalog.list_installable():
        version = entry.version
        if version in seen:
            continue
        seen.add(version)
        if version in installed or show_all:
            print(_marker(version, installed, current), version)

    for version in sorted(installed - seen):
        print(_marker(version, installed, current), version)

    return 0
