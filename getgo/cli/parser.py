"""
getgo CLI argument parser.

This module implements the command-line interface for getgo using argparse.

    getgo [status]           # Display current info, install latest if not found
    getgo list [all]         # List installed; "all" lists all stable versions
    getgo setup [-s]         # Set environment variables (-s: non-interactive)
    getgo remove VERSION     # Remove a specific version
    getgo VERSION [CL]       # Set default, installing it first if needed
                             # e.g. up, latest, tip, go1.21, 1.20
"""

import argparse
import importlib
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import List, Optional

from getgo.core.exceptions import GetgoError
from getgo.core.process import CommandRunner

try:
    __version__ = version("getgo")
except PackageNotFoundError:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Subcommand -> implementing module; each exposes run(args, services) -> int
COMMAND_MODULES = {
    "status": "getgo.cli.commands.status",
    "list": "getgo.cli.commands.list_versions",
    "remove": "getgo.cli.commands.remove",
    "setup": "getgo.cli.commands.setup",
    "use": "getgo.cli.commands.use",
}
COMMANDS = tuple(COMMAND_MODULES)

LOG_FORMATS = {
    logging.DEBUG: "%(levelname)s [%(name)s] %(message)s",
    logging.INFO: "%(message)s",
    logging.ERROR: "%(levelname)s: %(message)s",
}

EPILOG = """\
Examples:
    getgo              # Display current info, install latest if not found
    getgo list all     # List all stable versions
    getgo remove 1.20  # Remove go1.20
    getgo setup -s     # Set environment variables, noninteractive mode
    getgo latest       # Set default, install latest if not exist
    getgo 1.21         # Set default, install go1.21 if not exist
    getgo tip 23102    # Set default, install CL 23102 if not exist
"""


class CLI:
    """getgo command-line interface."""

    def __init__(self, runner: Optional[CommandRunner] = None):
        """
        Initialize CLI with argument parser.

        Args:
            runner: External command runner handed to the services
                (real subprocesses if None)
        """
        self.runner = runner
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="getgo",
            description="getgo - A command-line installer for Go",
            epilog=EPILOG,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"getgo {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ~/.getgo.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        subparsers.add_parser(
            "status",
            help="Display current info, install latest if not found",
        )

        list_parser = subparsers.add_parser(
            "list",
            help="List installed versions",
            description="List installed versions; 'all' also lists every stable release",
        )
        list_parser.add_argument(
            "scope", nargs="?", choices=["all"], help="Include versions not installed"
        )
        list_parser.add_argument(
            "-a", "--all", dest="all", action="store_true", help="Same as 'all'"
        )

        remove_parser = subparsers.add_parser(
            "remove",
            help="Remove a specific version",
            description="Remove an installed version (never the current one)",
        )
        remove_parser.add_argument("version", help="Version to remove (e.g. 1.20, go1.20)")

        setup_parser = subparsers.add_parser(
            "setup",
            help="Set environment variables",
            description="Persist GOPATH and PATH for future shell sessions",
        )
        setup_parser.add_argument(
            "-s",
            "--silent",
            action="store_true",
            help="Noninteractive mode: do not ask for confirmation",
        )

        use_parser = subparsers.add_parser(
            "use",
            help="Set default version, installing it if needed",
            description="Resolve VERSION, install it if missing and make it current",
        )
        use_parser.add_argument(
            "version", help="Version specifier: up, latest, update, tip, 1.21, go1.21"
        )
        use_parser.add_argument(
            "changelist", nargs="?", help="Changelist number (tip only)"
        )

        return parser

    def normalize_argv(self, args: List[str]) -> List[str]:
        """
        Map the short forms onto subcommands.

        No command means 'status'; a first positional that is not a
        command is a version specifier for 'use'.
        """
        args = list(args)
        i = 0
        while i < len(args):
            token = args[i]
            if token == "--config":
                i += 2
                continue
            if token.startswith("-"):
                i += 1
                continue
            if token not in COMMANDS:
                args.insert(i, "use")
            return args

        if not any(t in ("-h", "--help", "--version") for t in args):
            args.append("status")
        return args

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)
        """
        if args is None:
            args = sys.argv[1:]
        return self.parser.parse_args(self.normalize_argv(args))

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Parse args, run the selected command and map errors to an exit code.

        Returns:
            0 on success, 1 for a getgo error, 130 when interrupted
        """
        parsed_args = self.parse_args(args)
        self._configure_logging(parsed_args)

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Interrupted")
            return 130
        except GetgoError as e:
            logger.error(f"Error: {e}")
            logger.debug("Traceback:", exc_info=True)
            return 1

    def _configure_logging(self, args):
        """-v shows debug records with logger names, -q only errors."""
        level = logging.INFO
        if args.verbose:
            level = logging.DEBUG
        elif args.quiet:
            level = logging.ERROR
        logging.basicConfig(level=level, format=LOG_FORMATS[level], force=True)

    def _dispatch_command(self, args) -> int:
        from getgo.cli.utils import build_services

        module = importlib.import_module(COMMAND_MODULES[args.command])
        services = build_services(args, runner=self.runner)
        return module.run(args, services)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
