#!/usr/bin/env python3
"""
Search service: the surface consumed by the presentation layer.

Submit a search, list recent searches, fetch a prior search's results.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Union

from .database import RecordStore
from .database.record_store import DEFAULT_RECENT_LIMIT
from .models import SearchRecord, SearchRequest, SearchResults
from .orchestrator import SearchOrchestrator
from .summary import SummaryAggregator

logger = logging.getLogger(__name__)


class SearchService:
    """Thin facade over the orchestrator and the record store."""

    def __init__(self, orchestrator: SearchOrchestrator, store: RecordStore,
                 aggregator: Optional[SummaryAggregator] = None,
                 recent_limit: int = DEFAULT_RECENT_LIMIT) -> None:
        self.orchestrator = orchestrator
        self.store = store
        self.aggregator = aggregator or SummaryAggregator()
        self.recent_limit = recent_limit

    def submit(self, request: Union[SearchRequest, Dict[str, Any]],
               cancel_event: Optional[threading.Event] = None) -> SearchResults:
        """
        Run a search.

        Args:
            request: SearchRequest, or a dict validated into one
            cancel_event: Optional cancellation signal

        Raises:
            ValidationError: Request dict is invalid
            SearchFailedError: The search aborted
            SearchCancelledError: The search was cancelled
        """
        if not isinstance(request, SearchRequest):
            request = SearchRequest.from_dict(request)
        return self.orchestrator.run(request, cancel_event=cancel_event)

    def list_recent_searches(self, limit: Optional[int] = None) -> List[SearchRecord]:
        """Newest searches first."""
        return self.store.list_recent_searches(limit or self.recent_limit)

    def get_results(self, search_id: int) -> Optional[SearchResults]:
        """
        Load a prior search with its images and a freshly computed summary.

        Returns:
            SearchResults, or None if the search does not exist
        """
        record = self.store.get_search(search_id)
        if record is None:
            logger.info(f"Search {search_id} not found")
            return None

        images = self.store.list_images_by_search(search_id)
        return SearchResults(search=record, images=images, summary=self.aggregator.summarize(images))
