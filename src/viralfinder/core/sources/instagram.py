#!/usr/bin/env python3
"""
Instagram discovery.

Primary: Apify hashtag scraper with the whitespace-stripped query as the
hashtag. Fallback: Serper image search scoped to instagram.com, whose results
carry no structured payload.
"""

import re
import logging
from typing import List, Dict, Any

from ..exceptions import DiscoveryError
from ..models import Candidate, Platform, RawPayload
from .base import ContentSource, SourceMetadata

logger = logging.getLogger(__name__)

TITLE_LENGTH = 100


def hashtag_from_query(query: str) -> str:
    """Collapse a multi-word query into a single hashtag token."""
    return re.sub(r'\s+', '', query or '')


class InstagramSource(ContentSource):
    """Instagram discovery via Apify with a Serper image-search fallback."""

    platform = Platform.INSTAGRAM

    def __init__(self, apify_client=None, serper_client=None):
        """
        Initialize source.

        Args:
            apify_client: ApifyClient or None when APIFY_API_KEY is unset
            serper_client: SerperClient or None when SERPER_API_KEY is unset
        """
        self.apify_client = apify_client
        self.serper_client = serper_client

    def discover(self, query: str, limit: int) -> List[Candidate]:
        logger.info(f"Scraping Instagram for: {query}")
        try:
            return self._discover_with_apify(query, limit)
        except DiscoveryError as e:
            logger.error(f"Instagram scraping failed: {e}")
        except Exception as e:
            logger.error(f"Instagram scraping failed unexpectedly: {e}", exc_info=True)

        return self._discover_with_serper(query, limit)

    def _discover_with_apify(self, query: str, limit: int) -> List[Candidate]:
        if self.apify_client is None:
            raise DiscoveryError("Apify API key not configured")

        items = self.apify_client.scrape_hashtag(hashtag_from_query(query), limit)
        return [self._candidate_from_apify(item) for item in items]

    @staticmethod
    def _candidate_from_apify(item: Dict[str, Any]) -> Candidate:
        short_code = item.get('shortCode') or ''
        caption = item.get('caption') or ''
        if not isinstance(caption, str):
            caption = str(caption)
        return Candidate(
            id=item.get('id') or short_code,
            image_url=item.get('displayUrl') or item.get('thumbnail') or '',
            post_url=f"https://instagram.com/p/{short_code}",
            title=caption[:TITLE_LENGTH],
            description=caption,
            raw=RawPayload(Platform.INSTAGRAM, item),
        )

    def _discover_with_serper(self, query: str, limit: int) -> List[Candidate]:
        if self.serper_client is None:
            logger.error("Serper Instagram fallback unavailable: Serper API key not configured")
            return []

        try:
            items = self.serper_client.search_images(f'site:instagram.com "{query}" viral popular', limit)
        except DiscoveryError as e:
            logger.error(f"Serper Instagram fallback failed: {e}")
            return []
        except Exception as e:
            logger.error(f"Serper Instagram fallback failed unexpectedly: {e}", exc_info=True)
            return []

        logger.info(f"Serper fallback returned {len(items)} Instagram results")
        return [
            Candidate(
                id=f"ig_serper_{index}",
                image_url=item.get('imageUrl') or '',
                post_url=item.get('link') or '',
                title=item.get('title') or '',
                description=item.get('snippet') or '',
                raw=None,
            )
            for index, item in enumerate(items)
        ]

    def get_metadata(self) -> SourceMetadata:
        return SourceMetadata(
            platform=self.platform,
            display_name="Instagram",
            primary_method="apify_hashtag_scraper",
            fallback_method="serper_image_search",
        )

    def health_check(self) -> Dict[str, Any]:
        return {
            'available': self.apify_client is not None or self.serper_client is not None,
            'primary_configured': self.apify_client is not None,
            'fallback_configured': self.serper_client is not None,
        }
