"""
sdkcache CLI argument parser.

This module implements the command-line interface for sdkcache using argparse.
"""

import argparse
import importlib
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("sdkcache")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """sdkcache command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="sdkcache",
            description="sdkcache - Manage locally cached SDK versions",
            epilog='Use "sdkcache COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"sdkcache {__version__}"
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
            help="Path to configuration file (default: <home>/config.yaml)",
        )
        parser.add_argument(
            "--home",
            type=Path,
            metavar="PATH",
            help="sdkcache home directory (default: $SDKCACHE_HOME or ~/.sdkcache)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_list_command(subparsers)
        self._add_install_command(subparsers)
        self._add_remove_command(subparsers)
        self._add_global_command(subparsers)
        self._add_verify_command(subparsers)

        return parser

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        subparsers.add_parser(
            "list",
            help="List cached versions",
            description="List cached versions, channels first, newest first",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Cache an SDK version",
            description="Fetch an SDK version into the cache if it is not there yet",
        )
        parser.add_argument(
            "version", metavar="VERSION", help="Channel or semantic version"
        )
        parser.add_argument(
            "--global",
            dest="set_global",
            action="store_true",
            help="Make the version global after installing",
        )
        parser.add_argument(
            "--fix-mismatch",
            action="store_true",
            help="Move the version to its SDK version directory on mismatch",
        )

    def _add_remove_command(self, subparsers):
        """Add 'remove' subcommand."""
        parser = subparsers.add_parser(
            "remove",
            help="Remove a cached version",
            description="Remove a cached version (and the global link to it)",
        )
        parser.add_argument(
            "version", metavar="VERSION", help="Cached version to remove"
        )

    def _add_global_command(self, subparsers):
        """Add 'global' subcommand."""
        parser = subparsers.add_parser(
            "global",
            help="Show or set the global version",
            description="Show, set or unset the global (default) version",
        )
        parser.add_argument(
            "version",
            nargs="?",
            metavar="VERSION",
            help="Cached version to make global",
        )
        parser.add_argument(
            "--unset", action="store_true", help="Remove the global version"
        )

    def _add_verify_command(self, subparsers):
        """Add 'verify' subcommand."""
        parser = subparsers.add_parser(
            "verify",
            help="Verify cached version integrity",
            description="Check that cached versions are executable and match",
        )
        parser.add_argument(
            "version",
            nargs="?",
            metavar="VERSION",
            help="Cached version to verify (default: all)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        # Command module mapping
        command_map = {
            "list": "sdkcache.cli.commands.listing",
            "install": "sdkcache.cli.commands.install",
            "remove": "sdkcache.cli.commands.remove",
            "global": "sdkcache.cli.commands.global_version",
            "verify": "sdkcache.cli.commands.verify",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
