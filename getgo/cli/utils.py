"""
Shared utilities for CLI commands.

Builds the collaborating services once per invocation so every command sees
the same configuration, layout and command runner.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from getgo.core.config import GetgoConfig, load_config
from getgo.core.directory import SdkLayout
from getgo.core.platform import detect_platform
from getgo.core.process import CommandRunner
from getgo.toolchain.catalog import CatalogFetcher
from getgo.toolchain.installer import Installer
from getgo.toolchain.pointer import CurrentPointer
from getgo.toolchain.profile import ProfileWriter
from getgo.toolchain.resolver import VersionResolver

logger = logging.getLogger(__name__)

SETUP_HINT = "you may need to run `getgo setup` to set up the environment, just once"


@dataclass
class Services:
    """Collaborators shared by the command implementations."""

    config: GetgoConfig
    layout: SdkLayout
    catalog: CatalogFetcher
    resolver: VersionResolver
    installer: Installer
    pointer: CurrentPointer
    profile: ProfileWriter


def build_services(args, runner: Optional[CommandRunner] = None) -> Services:
    """
    Create the services for one CLI invocation.

    Args:
        args: Parsed arguments (uses args.config if present)
        runner: External command runner (real subprocesses if None)
    """
    config = load_config(getattr(args, "config", None))
    platform = detect_platform()
    runner = runner or CommandRunner()

    layout = SdkLayout(config.home_dir, platform)
    catalog = CatalogFetcher(config.catalog_url, config.request_timeout, platform)
    logger.debug(f"sdk root: {layout.sdk_root}, catalog: {config.catalog_url}")

    return Services(
        config=config,
        layout=layout,
        catalog=catalog,
        resolver=VersionResolver(catalog),
        installer=Installer(layout, catalog, config, runner),
        pointer=CurrentPointer(layout),
        profile=ProfileWriter(config.home_dir, platform, runner),
    )

