#!/usr/bin/env python3
"""
Facebook discovery via Serper web search.

There is a single discovery method for this platform; failures yield an
empty result rather than a secondary lookup.
"""

import logging
from typing import List, Dict, Any

from ..exceptions import DiscoveryError
from ..models import Candidate, Platform, RawPayload
from .base import ContentSource, SourceMetadata

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_URL = "https://graph.facebook.com/v12.0/facebook/picture?type=large"


class FacebookSource(ContentSource):
    """Facebook discovery through site-scoped Google results."""

    platform = Platform.FACEBOOK

    def __init__(self, serper_client=None):
        self.serper_client = serper_client

    def discover(self, query: str, limit: int) -> List[Candidate]:
        logger.info(f"Scraping Facebook for: {query}")
        if self.serper_client is None:
            logger.error("Facebook scraping failed: Serper API key not configured")
            return []

        try:
            items = self.serper_client.search_web(f'site:facebook.com "{query}" viral popular engagement', limit)
        except DiscoveryError as e:
            logger.error(f"Facebook scraping failed: {e}")
            return []

        logger.info(f"Found {len(items)} Facebook results")
        return [
            Candidate(
                id=f"fb_{index}",
                image_url=item.get('thumbnail') or DEFAULT_IMAGE_URL,
                post_url=item.get('link') or '',
                title=item.get('title') or '',
                description=item.get('snippet') or '',
                raw=RawPayload(Platform.FACEBOOK, item),
            )
            for index, item in enumerate(items)
        ]

    def get_metadata(self) -> SourceMetadata:
        return SourceMetadata(
            platform=self.platform,
            display_name="Facebook",
            primary_method="serper_web_search",
        )

    def health_check(self) -> Dict[str, Any]:
        return {
            'available': self.serper_client is not None,
            'primary_configured': self.serper_client is not None,
            'fallback_configured': False,
        }
