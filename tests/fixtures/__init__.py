"""Test fixtures for getgo tests.

Helpers are organized by type:

- runner: FakeRunner, a CommandRunner that records instead of executing
- releases: Catalog JSON builders and fake Go release archives
- directories: sdk/ trees with installed versions

Import helpers in your tests using:
    from tests.fixtures.runner import FakeRunner, argv_endswith
    from tests.fixtures.directories import make_installed_version
"""

__all__ = [
    "runner",
    "releases",
    "directories",
]
