#!/usr/bin/env python3
"""
Apify integration for Instagram hashtag discovery.

Runs the public instagram-hashtag-scraper actor synchronously and returns
its dataset items in one call.
"""

import logging
from typing import List, Dict, Any, Optional

import requests

from viralfinder.core.exceptions import DiscoveryConnectionError, DiscoveryResponseError

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Apify"

HASHTAG_SCRAPER_ACTOR = "apify~instagram-hashtag-scraper"


class ApifyClient:
    """HTTP client for synchronous Apify actor runs."""

    def __init__(self, token: str, base_url: str = "https://api.apify.com", timeout: int = 60,
                 session: Optional[requests.Session] = None):
        """
        Initialize Apify client.

        Args:
            token: Apify API token
            base_url: Base URL for the Apify API
            timeout: Request timeout in seconds
            session: Optional pre-configured requests session
        """
        if not token:
            raise ValueError("Apify token is required")
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def run_actor_sync(self, actor_id: str, run_input: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Run an actor and return its dataset items.

        Raises:
            DiscoveryConnectionError: Transport failure
            DiscoveryResponseError: Non-success status or non-list body
        """
        url = f"{self.base_url}/v2/acts/{actor_id}/run-sync-get-dataset-items"
        logger.debug(f"Running Apify actor {actor_id}")

        try:
            response = self.session.post(url, params={"token": self.token}, json=run_input, timeout=self.timeout)
        except requests.RequestException as e:
            raise DiscoveryConnectionError(PROVIDER_NAME, url, e) from e

        if not response.ok:
            raise DiscoveryResponseError(PROVIDER_NAME, response.status_code, response.text)

        try:
            items = response.json()
        except ValueError as e:
            raise DiscoveryResponseError(PROVIDER_NAME, response.status_code, f"invalid JSON: {e}") from e

        if not isinstance(items, list):
            raise DiscoveryResponseError(PROVIDER_NAME, response.status_code, "expected a list of dataset items")

        return [item for item in items if isinstance(item, dict)]

    def scrape_hashtag(self, hashtag: str, limit: int) -> List[Dict[str, Any]]:
        """Fetch up to `limit` recent posts for one hashtag."""
        run_input = {
            "hashtags": [hashtag],
            "resultsLimit": limit,
            "addParentData": False,
        }
        items = self.run_actor_sync(HASHTAG_SCRAPER_ACTOR, run_input)
        logger.info(f"Apify returned {len(items)} Instagram results for #{hashtag}")
        return items
