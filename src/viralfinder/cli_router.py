#!/usr/bin/env python3
"""
CLI Router for the Viral Content Finder.

Modular command architecture over the search pipeline.
"""

import argparse
import logging
import sys
from typing import Optional, List

from viralfinder.commands import get_command, COMMANDS
from viralfinder.core.config import get_config_manager
from viralfinder.core.exceptions import ConfigurationError
from viralfinder.core.models.search import MAX_IMAGES_LIMIT, DEFAULT_MAX_IMAGES

logger = logging.getLogger(__name__)


class CLIRouter:
    """
    CLI router for viral content search commands.

    Command structure:
    - python run.py search run "coffee" --max-images 10
    - python run.py search history
    - python run.py search show 42
    - python run.py integrations status
    - python run.py health check
    """

    def __init__(self, container=None):
        """Initialize CLI router."""
        self.container = container
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description="Viral Content Finder for Instagram and Facebook",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{command}'
        )

        self._add_search_parser(subparsers)
        self._add_integrations_parser(subparsers)
        self._add_health_parser(subparsers)

        return parser

    def _add_search_parser(self, subparsers):
        """Add search command parser."""
        search_parser = subparsers.add_parser(
            'search',
            help='Run viral content searches and browse results'
        )

        search_subparsers = search_parser.add_subparsers(
            dest='subcommand',
            help='Search operations',
            metavar='{run,history,show}'
        )

        # Run subcommand
        run_parser = search_subparsers.add_parser('run', help='Find viral posts for a query')
        run_parser.add_argument('query', help='Search query (becomes a hashtag for Instagram)')
        run_parser.add_argument('--max-images', type=int, default=DEFAULT_MAX_IMAGES, help=f'Maximum images to keep, 1-{MAX_IMAGES_LIMIT} (default: {DEFAULT_MAX_IMAGES})')
        run_parser.add_argument('--min-engagement', type=float, default=0, help='Minimum engagement score to keep (default: 0)')
        run_parser.add_argument('--platforms', nargs='+', choices=['instagram', 'facebook'], default=['instagram', 'facebook'], help='Platforms to search (default: both)')
        run_parser.add_argument('--workers', type=int, default=None, help='Worker threads for discovery and analysis (default: MAX_WORKERS)')
        run_parser.add_argument('--json', action='store_true', help='Print results as JSON')

        # History subcommand
        history_parser = search_subparsers.add_parser('history', help='List recent searches')
        history_parser.add_argument('--limit', type=int, default=None, help='Number of searches to show (default: RECENT_SEARCHES_LIMIT)')

        # Show subcommand
        show_parser = search_subparsers.add_parser('show', help='Show results of a prior search')
        show_parser.add_argument('search_id', type=int, help='Search identifier')
        show_parser.add_argument('--json', action='store_true', help='Print results as JSON')

    def _add_integrations_parser(self, subparsers):
        """Add integrations command parser."""
        integrations_parser = subparsers.add_parser(
            'integrations',
            help='External integration status'
        )

        integrations_subparsers = integrations_parser.add_subparsers(
            dest='subcommand',
            help='Integration operations',
            metavar='{status,test}'
        )

        integrations_subparsers.add_parser('status', help='Show which providers are configured')
        integrations_subparsers.add_parser('test', help='Test the analysis provider connection')

    def _add_health_parser(self, subparsers):
        """Add health command parser."""
        health_parser = subparsers.add_parser(
            'health',
            help='System health monitoring and diagnostics'
        )

        health_subparsers = health_parser.add_subparsers(
            dest='subcommand',
            help='Health operations',
            metavar='{check}'
        )

        health_subparsers.add_parser('check', help='Run comprehensive health check')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        return """
Examples:
  python run.py search run "coffee"
  python run.py search run "street food" --max-images 10 --min-engagement 40
  python run.py search run "sunset" --platforms instagram --workers 4 --json

  python run.py search history --limit 5
  python run.py search show 12
  python run.py integrations status
  python run.py health check

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
            try:
                self.parser.parse_args([args.command, '--help'])
            except SystemExit:
                pass
            return 1

        try:
            command = get_command(args.command, self.container)
            return command.execute(subcommand, args)
        except Exception as e:
            logger.error(f"Error executing {args.command} {subcommand}: {e}", exc_info=True)
            return 1


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
        logger.error(str(e))
        return 78

    router = CLIRouter()
    return router.route_command(args)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
