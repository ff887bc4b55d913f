"""
Pytest configuration and shared fixtures for getgo tests.
"""

import json
import os
from pathlib import Path
from typing import Callable, Optional

import pytest

from getgo.core.directory import SdkLayout
from getgo.core.platform import PlatformInfo, detect_platform
from tests.fixtures.directories import make_installed_version
from tests.fixtures.releases import archive_filename, build_go_archive, release
from tests.fixtures.runner import FakeRunner


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


# ============================================================================
# Platforms and layouts
# ============================================================================


@pytest.fixture
def platform_linux() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="x64", os_version="5.15")


@pytest.fixture
def platform_windows() -> PlatformInfo:
    return PlatformInfo(os="windows", arch="x64", os_version="10.0.19041")


@pytest.fixture
def home_dir(tmp_path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def layout(home_dir, platform_linux) -> SdkLayout:
    return SdkLayout(home_dir, platform_linux)


@pytest.fixture
def install_version(layout) -> Callable[[str], Path]:
    return lambda version: make_installed_version(layout, version)


# ============================================================================
# Catalog data
# ============================================================================


@pytest.fixture
def catalog_data() -> list:
    """Catalog with an unstable release first, newest stable second."""
    return [
        release("go1.22rc1", stable=False),
        release("go1.21.5"),
        release("go1.20.12"),
    ]


@pytest.fixture
def catalog_json(catalog_data) -> str:
    return json.dumps(catalog_data)


@pytest.fixture
def go_archive(tmp_path):
    """Factory building a release archive; returns (bytes, sha256, filename)."""

    def factory(version: str, platform: Optional[PlatformInfo] = None):
        filename = archive_filename(version, platform or detect_platform())
        path = tmp_path / "archives" / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        sha256 = build_go_archive(path, version)
        return path.read_bytes(), sha256, filename

    return factory


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from getgo.core import platform

    platform.clear_platform_cache()
    yield


@pytest.fixture
def clean_env(monkeypatch):
    """Drop getgo environment overrides inherited from the developer's shell."""
    for name in list(os.environ):
        if name.startswith("GETGO_"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch
