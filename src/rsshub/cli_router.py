#!/usr/bin/env python3
"""
CLI Router for the RSS hub.

    python run.py server start --port 3000
    python run.py feed fetch --format json
    python run.py sources list
    python run.py sources check
"""

import argparse
import logging
import sys
from typing import Optional, List

from .commands import get_command, COMMANDS
from .config import get_config_manager
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class CLIRouter:
    """Routes `<command> <subcommand>` invocations to command classes."""

    def __init__(self):
        """Initialize CLI router."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description="Financial News RSS Hub",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{command}'
        )

        self._add_server_parser(subparsers)
        self._add_feed_parser(subparsers)
        self._add_sources_parser(subparsers)

        return parser

    def _add_server_parser(self, subparsers):
        """Add server command parser."""
        server_parser = subparsers.add_parser('server', help=COMMANDS['server']().describe())
        server_subparsers = server_parser.add_subparsers(dest='subcommand', metavar='{start}')

        start_parser = server_subparsers.add_parser('start', help='Serve /rss, /json and /status')
        start_parser.add_argument('--port', type=int, default=None, help='Port to listen on (default: $PORT or 3000)')
        start_parser.add_argument('--host', default=None, help='Bind address (default: $HOST or 0.0.0.0)')

    def _add_feed_parser(self, subparsers):
        """Add feed command parser."""
        feed_parser = subparsers.add_parser('feed', help=COMMANDS['feed']().describe())
        feed_subparsers = feed_parser.add_subparsers(dest='subcommand', metavar='{fetch}')

        fetch_parser = feed_subparsers.add_parser('fetch', help='Aggregate all sources once')
        fetch_parser.add_argument('--format', choices=['rss', 'json'], default='rss', help='Output format (default: rss)')
        fetch_parser.add_argument('--output', default=None, help='Write to file instead of stdout')

    def _add_sources_parser(self, subparsers):
        """Add sources command parser."""
        sources_parser = subparsers.add_parser('sources', help=COMMANDS['sources']().describe())
        sources_subparsers = sources_parser.add_subparsers(dest='subcommand', metavar='{list,check}')

        sources_subparsers.add_parser('list', help='Show configured sources')
        sources_subparsers.add_parser('check', help='Check source availability')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        return """
Examples:
  python run.py server start
  python run.py server start --port 8080
  python run.py feed fetch --format json --output feed.json
  python run.py sources check
"""

    def route_command(self, args: Optional[List[str]] = None) -> int:
        """
        Route command to appropriate handler.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        try:
            if args is None:
                args = sys.argv[1:]

            parsed_args = self.parser.parse_args(args)

            if not parsed_args.command:
                self.parser.print_help()
                return 1

            return self._handle_command(parsed_args)

        except SystemExit as e:
            # argparse calls sys.exit() on error or help
            return e.code if e.code is not None else 0
        except Exception as e:
            logger.error(f"CLI routing error: {e}", exc_info=True)
            return 1

    def _handle_command(self, args: argparse.Namespace) -> int:
        """Handle command structure."""
        logger.debug(f"Handling command: {args.command}")

        if args.command not in COMMANDS:
            available = ', '.join(COMMANDS.keys())
            logger.error(f"Unknown command '{args.command}'. Available: {available}")
            return 1

        subcommand = getattr(args, 'subcommand', None)
        if not subcommand:
            logger.error(f"No subcommand specified for '{args.command}'")
            self.parser.print_help()
            return 1

        command = get_command(args.command)
        return command.execute(subcommand, args)


def main(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        get_config_manager().update_logging()
    except ConfigurationError as e:
        logger.error(e.message)
        return 22

    router = CLIRouter()
    return router.route_command(args)


if __name__ == '__main__':
    sys.exit(main())
