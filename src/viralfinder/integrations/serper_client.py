#!/usr/bin/env python3
"""
Serper integration for Google web and image search.
"""

import logging
from typing import List, Dict, Any, Optional

import requests

from viralfinder.core.exceptions import DiscoveryConnectionError, DiscoveryResponseError

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Serper"


class SerperClient:
    """Client for the google.serper.dev search endpoints."""

    def __init__(self, api_key: str, base_url: str = "https://google.serper.dev", timeout: int = 60,
                 session: Optional[requests.Session] = None):
        if not api_key:
            raise ValueError("Serper API key is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "X-API-KEY": api_key,
            "Content-Type": "application/json",
        })

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise DiscoveryConnectionError(PROVIDER_NAME, url, e) from e

        if not response.ok:
            raise DiscoveryResponseError(PROVIDER_NAME, response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise DiscoveryResponseError(PROVIDER_NAME, response.status_code, f"invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise DiscoveryResponseError(PROVIDER_NAME, response.status_code, "expected a JSON object")
        return data

    def search_images(self, query: str, num: int) -> List[Dict[str, Any]]:
        """Google image search; returns the 'images' list."""
        data = self._post("images", {"q": query, "num": num, "safe": "off"})
        images = data.get("images") or []
        logger.debug(f"Serper image search returned {len(images)} results for {query!r}")
        return [item for item in images if isinstance(item, dict)]

    def search_web(self, query: str, num: int, gl: str = "us", hl: str = "en") -> List[Dict[str, Any]]:
        """Google web search; returns the 'organic' list."""
        data = self._post("search", {"q": query, "num": num, "gl": gl, "hl": hl})
        organic = data.get("organic") or []
        logger.debug(f"Serper web search returned {len(organic)} results for {query!r}")
        return [item for item in organic if isinstance(item, dict)]
