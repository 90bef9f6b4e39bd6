#!/usr/bin/env python3
"""
Search command endpoints: run searches and browse prior results.
"""

import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from argparse import Namespace

from .base import BaseCommand
from viralfinder.core.exceptions import SearchCancelledError, SearchFailedError
from viralfinder.core.formatters import format_results, format_search_history
from viralfinder.core.models import SearchRequest
from viralfinder.core.orchestrator import MAX_WORKERS_LIMIT

logger = logging.getLogger(__name__)


class SearchCommand(BaseCommand):
    """Find viral posts for a query and review past searches."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute search subcommand."""
        try:
            if subcommand == "run":
                return self.run(args)
            elif subcommand == "history":
                return self.history(args)
            elif subcommand == "show":
                return self.show(args)
            else:
                available = ", ".join(self.get_available_subcommands())
                self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
                return 1

        except Exception as e:
            return self.handle_error(e, f"search {subcommand}")

    def run(self, args: Namespace) -> int:
        """Run a new search."""
        request = SearchRequest.from_dict({
            'query': args.query,
            'max_images': getattr(args, 'max_images', None),
            'min_engagement': getattr(args, 'min_engagement', None),
            'platforms': getattr(args, 'platforms', None),
        })

        service = self.create_search_service()
        workers = getattr(args, 'workers', None)
        if workers:
            service.orchestrator.max_workers = max(1, min(workers, MAX_WORKERS_LIMIT))

        as_json = getattr(args, 'json', False)
        if not as_json:
            print(f"🔍 Searching {', '.join(p.value for p in request.platforms)} for '{request.query}'...")

        try:
            results = self._submit(service, request)
        except KeyboardInterrupt:
            print("\n⚠️  Search cancelled")
            return 130
        except SearchCancelledError as e:
            self.logger.warning(str(e))
            return 130
        except SearchFailedError as e:
            self.logger.error(f"Search failed: {e.context.get('original_error')}")
            print(json.dumps(e.to_payload(), indent=2, ensure_ascii=False))
            return 1

        if as_json:
            print(json.dumps(results.to_dict(), indent=2, ensure_ascii=False))
        else:
            print(format_results(results))

        run_metrics = service.orchestrator.last_run_metrics
        if run_metrics is not None:
            self.logger.debug(f"Run metrics: {run_metrics.to_dict()}")
        return 0

    @staticmethod
    def _submit(service, request: SearchRequest):
        """
        Run the search on a worker thread so Ctrl-C reaches the main thread.

        On KeyboardInterrupt the cancel event is set and the worker is awaited,
        so the search record is finalized before the interrupt propagates.
        """
        cancel_event = threading.Event()
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="search") as executor:
            future = executor.submit(service.submit, request, cancel_event)
            try:
                return future.result()
            except KeyboardInterrupt:
                cancel_event.set()
                error = future.exception()
                if error is not None and not isinstance(error, KeyboardInterrupt):
                    logger.debug(f"Search worker stopped with: {error!r}")
                raise

    def history(self, args: Namespace) -> int:
        """List recent searches."""
        service = self.create_search_service()
        records = service.list_recent_searches(getattr(args, 'limit', None))
        print("🕘 Recent searches:")
        print(format_search_history(records))
        return 0

    def show(self, args: Namespace) -> int:
        """Show a prior search's results."""
        service = self.create_search_service()
        results = service.get_results(args.search_id)
        if results is None:
            print(f"❌ Search not found: {args.search_id}")
            return 1

        if getattr(args, 'json', False):
            print(json.dumps(results.to_dict(), indent=2, ensure_ascii=False))
        else:
            print(format_results(results))
        return 0
