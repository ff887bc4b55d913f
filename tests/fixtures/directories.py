"""sdk/ directory structures for testing."""

from pathlib import Path

from getgo.core.directory import SdkLayout


def make_installed_version(layout: SdkLayout, version: str) -> Path:
    """
    Create a minimal install directory with a go binary.

    Returns:
        The version's install directory
    """
    binary = layout.toolchain_binary(version)
    binary.parent.mkdir(parents=True, exist_ok=True)
    binary.write_text("#!/bin/sh\n")
    binary.chmod(0o755)
    (layout.version_root(version) / "VERSION").write_text(version)
    return layout.version_root(version)
