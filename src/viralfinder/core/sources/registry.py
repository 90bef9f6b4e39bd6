#!/usr/bin/env python3
"""
Content source registry.

Dispatches discovery to the source registered for a platform.
"""

import logging
from typing import Dict, List, Optional, Any

from ..models import Candidate, Platform
from .base import ContentSource
from .instagram import InstagramSource
from .facebook import FacebookSource

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Registry of content sources keyed by platform."""

    def __init__(self):
        """Initialize empty registry."""
        self._sources: Dict[Platform, ContentSource] = {}

    def register_source(self, source: ContentSource, platform: Optional[Platform] = None):
        """
        Register a content source.

        Args:
            source: ContentSource instance
            platform: Optional override (uses source.platform if not provided)
        """
        platform = platform or source.platform
        self._sources[platform] = source
        logger.debug(f"Registered content source: {platform.value}")

    def get_source(self, platform: Platform) -> ContentSource:
        """
        Raises:
            KeyError: If no source is registered for the platform
        """
        if platform not in self._sources:
            available = [p.value for p in self._sources]
            raise KeyError(f"Source '{platform.value}' not found. Available: {available}")
        return self._sources[platform]

    def list_available_sources(self) -> List[Platform]:
        return list(self._sources.keys())

    def discover(self, query: str, platform: Platform, limit: int) -> List[Candidate]:
        """
        Discover candidates on one platform. Never raises.

        Returns:
            Candidates, or an empty list when the platform is unregistered or
            its source fails unexpectedly
        """
        try:
            source = self.get_source(platform)
            return list(source.discover(query, limit))
        except Exception as e:  # noqa: BLE001
            logger.error(f"Discovery failed for platform {platform.value}: {e}", exc_info=True)
            return []

    def health_check(self) -> Dict[str, Dict[str, Any]]:
        return {platform.value: source.health_check() for platform, source in self._sources.items()}


def build_default_registry(apify_client=None, serper_client=None) -> SourceRegistry:
    """Registry with the Instagram and Facebook sources wired to the given clients."""
    registry = SourceRegistry()
    registry.register_source(InstagramSource(apify_client=apify_client, serper_client=serper_client))
    registry.register_source(FacebookSource(serper_client=serper_client))
    return registry
