"""
Tests for the command implementations.

Commands are exercised with real layout and pointer objects on a temporary
home; network and process access is mocked.
"""

import argparse
import sys
from unittest.mock import MagicMock

import pytest

from getgo.cli.commands import list_versions, remove, setup, status, use
from getgo.cli.utils import SETUP_HINT, Services
from getgo.core.config import GetgoConfig
from getgo.core.exceptions import GuardError, SetupDeclined, UnknownSpecifierError
from getgo.toolchain.catalog import ArchiveEntry
from getgo.toolchain.installer import InstallResult
from getgo.toolchain.pointer import CurrentPointer
from getgo.toolchain.profile import SetupResult
from getgo.toolchain.resolver import VersionResolver

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="symlinks need privileges on Windows"
)


def archive(version):
    return ArchiveEntry(
        filename=f"{version}.linux-amd64.tar.gz",
        os="linux",
        arch="amd64",
        version=version,
        sha256="a" * 64,
        size=1,
        kind="archive",
    )


@pytest.fixture
def services(layout, home_dir):
    catalog = MagicMock()
    catalog.platform = layout.platform
    catalog.list_installable.return_value = [
        archive("go1.21.5"),
        archive("go1.21.5"),
        archive("go1.20.12"),
        archive("go1.19.13"),
    ]
    return Services(
        config=GetgoConfig(home=home_dir),
        layout=layout,
        catalog=catalog,
        resolver=VersionResolver(catalog),
        installer=MagicMock(),
        pointer=CurrentPointer(layout),
        profile=MagicMock(),
    )


class TestStatus:
    def test_shows_toolchain(self, services, tmp_path, capsys):
        gobin = tmp_path / "go"
        services.installer.find_toolchain.return_value = gobin
        services.installer.describe.return_value = ("go version go1.21.5 linux/amd64", "/usr/local/go")

        assert status.run(argparse.Namespace(), services) == 0

        assert capsys.readouterr().out == "go version go1.21.5 linux/amd64 (/usr/local/go)\n"
        services.installer.bootstrap.assert_not_called()

    def test_bootstraps_when_missing(self, services, install_version, capsys):
        services.installer.find_toolchain.return_value = None

        def bootstrap():
            install_version("go1.21.5")
            return services.layout.toolchain_binary("go1.21.5"), "go1.21.5"

        services.installer.bootstrap.side_effect = bootstrap

        assert status.run(argparse.Namespace(), services) == 0

        assert services.pointer.is_current("go1.21.5")
        assert capsys.readouterr().out == f"go1.21.5: {SETUP_HINT}\n"


class TestList:
    def test_installed_only(self, services, install_version, capsys):
        install_version("go1.21.5")
        install_version("go1.20.12")
        services.pointer.set_current("go1.21.5")

        list_versions.run(argparse.Namespace(all=False, scope=None), services)

        assert capsys.readouterr().out.splitlines() == ["* go1.21.5", "+ go1.20.12"]

    def test_all(self, services, install_version, capsys):
        install_version("go1.20.12")
        install_version("gotip")
        services.pointer.set_current("gotip")

        list_versions.run(argparse.Namespace(all=False, scope="all"), services)

        assert capsys.readouterr().out.splitlines() == [
            "  go1.21.5",
            "+ go1.20.12",
            "  go1.19.13",
            "* gotip",
        ]

    def test_nothing_installed(self, services, capsys):
        list_versions.run(argparse.Namespace(all=False, scope=None), services)
        assert capsys.readouterr().out == ""


class TestRemove:
    def test_remove(self, services, install_version, capsys):
        install_version("go1.20.12")

        assert remove.run(argparse.Namespace(version="1.20.12"), services) == 0

        assert not services.layout.is_installed("go1.20.12")
        assert capsys.readouterr().out == "go1.20.12: removed\n"

    def test_remove_current(self, services, install_version):
        install_version("go1.21.5")
        services.pointer.set_current("go1.21.5")

        with pytest.raises(GuardError):
            remove.run(argparse.Namespace(version="go1.21.5"), services)
        assert services.layout.is_installed("go1.21.5")

    def test_remove_rejects_paths(self, services):
        with pytest.raises(UnknownSpecifierError):
            remove.run(argparse.Namespace(version="1/../../.."), services)


class TestUse:
    def _installs(self, services, install_version, bootstrapped=False):
        def ensure_installed(version, changelist=None):
            install_version(version)
            return InstallResult(
                version, services.layout.toolchain_binary(version), bootstrapped=bootstrapped
            )

        services.installer.ensure_installed.side_effect = ensure_installed

    def test_use_latest(self, services, install_version, capsys):
        self._installs(services, install_version)

        assert use.run(argparse.Namespace(version="latest", changelist=None), services) == 0

        services.installer.ensure_installed.assert_called_once_with("go1.21.5", None)
        assert services.pointer.is_current("go1.21.5")
        assert capsys.readouterr().out == "go1.21.5: already set default\n"

    def test_use_tip_with_changelist(self, services, install_version):
        self._installs(services, install_version)

        use.run(argparse.Namespace(version="tip", changelist="23102"), services)

        services.installer.ensure_installed.assert_called_once_with("gotip", "23102")
        assert services.pointer.is_current("gotip")

    def test_switch_changes_current(self, services, install_version):
        self._installs(services, install_version)

        use.run(argparse.Namespace(version="1.21.5", changelist=None), services)
        use.run(argparse.Namespace(version="1.20.12", changelist=None), services)

        assert services.pointer.is_current("go1.20.12")
        assert not services.pointer.is_current("go1.21.5")

    def test_bootstrap_hint(self, services, install_version, capsys):
        self._installs(services, install_version, bootstrapped=True)

        use.run(argparse.Namespace(version="1.20.12", changelist=None), services)

        assert capsys.readouterr().out.splitlines() == [
            "go1.20.12: already set default",
            f"go1.20.12: {SETUP_HINT}",
        ]


class TestSetup:
    def test_setup(self, services, home_dir, capsys):
        services.profile.setup_gopath.return_value = SetupResult(
            gopath=str(home_dir / "go"),
            gopath_created=True,
            path_added=[str(home_dir / "sdk" / "go" / "bin")],
        )
        services.profile.session_hint.return_value = "One more thing!"

        assert setup.run(argparse.Namespace(silent=True), services) == 0

        services.profile.setup_gopath.assert_called_once_with(
            services.layout.pointer_path / "bin", interactive=False
        )
        out = capsys.readouterr().out.splitlines()
        assert out[0] == f"GOPATH set to {home_dir / 'go'}"
        assert out[-1] == "One more thing!"

    def test_declined(self, services, capsys):
        services.profile.setup_gopath.side_effect = SetupDeclined(
            "Exiting and not setting up GOPATH."
        )

        assert setup.run(argparse.Namespace(silent=False), services) == 0

        assert capsys.readouterr().out == "Exiting and not setting up GOPATH.\n"
