"""
protoc-fetcher CLI argument parser.

This module implements the command-line interface using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from protoc_fetcher import __version__
from protoc_fetcher.core.exceptions import ProtocFetcherError

logger = logging.getLogger(__name__)


class CLI:
    """protoc-fetcher command-line interface."""

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
            prog="protoc-fetcher",
            description="Download official protoc releases, pegged to a version",
            epilog='Use "protoc-fetcher COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"protoc-fetcher {__version__}"
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
            help="Path to configuration file (default: ./protoc-fetcher.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_platform_command(subparsers)
        self._add_path_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install a protoc release and print its path",
            description="Download protoc VERSION (or reuse a cached copy) and print the binary path",
        )
        parser.add_argument(
            "release_version",
            metavar="VERSION",
            help="protoc release version without 'v' prefix (e.g., 28.0)",
        )
        parser.add_argument(
            "--out-dir",
            type=Path,
            default=Path.cwd(),
            metavar="DIR",
            help="Install root directory (default: current directory)",
        )
        parser.add_argument(
            "--lock",
            action="store_true",
            help="Hold a file lock while downloading to avoid duplicate downloads",
        )
        parser.add_argument(
            "--export",
            action="store_true",
            help="Print PROTOC=<path> instead of the bare path",
        )

    def _add_platform_command(self, subparsers):
        """Add 'platform' subcommand."""
        parser = subparsers.add_parser(
            "platform",
            help="Show the detected platform",
            description="Show the detected platform and the matching release naming",
        )
        parser.add_argument(
            "--release",
            dest="release_version",
            metavar="VERSION",
            help="Also show the release name and archive URL for VERSION",
        )

    def _add_path_command(self, subparsers):
        """Add 'path' subcommand."""
        parser = subparsers.add_parser(
            "path",
            help="Show where a release is (or would be) installed",
            description="Print the binary path for VERSION without downloading; "
            "exits with 1 if it is not installed",
        )
        parser.add_argument(
            "release_version",
            metavar="VERSION",
            help="protoc release version without 'v' prefix (e.g., 28.0)",
        )
        parser.add_argument(
            "--out-dir",
            type=Path,
            default=Path.cwd(),
            metavar="DIR",
            help="Install root directory (default: current directory)",
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

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except (ProtocFetcherError, ValueError) as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Logs go to stderr so stdout only carries command output.

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
            stream=sys.stderr,
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
        command_map = {
            "install": "protoc_fetcher.cli.commands.install",
            "platform": "protoc_fetcher.cli.commands.platform",
            "path": "protoc_fetcher.cli.commands.path",
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
