#!/usr/bin/env python3
"""
Base classes for content sources.

Defines the interface every platform discovery adapter implements.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any
from dataclasses import dataclass

from ..models import Candidate, Platform


@dataclass
class SourceMetadata:
    """Metadata about a content source."""
    platform: Platform
    display_name: str
    primary_method: str
    fallback_method: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'platform': self.platform.value,
            'display_name': self.display_name,
            'primary_method': self.primary_method,
            'fallback_method': self.fallback_method or None,
        }


class ContentSource(ABC):
    """
    Abstract base class for platform discovery.

    Implementations never raise from discover(): total failure yields an
    empty list.
    """

    platform: Platform

    @abstractmethod
    def discover(self, query: str, limit: int) -> List[Candidate]:
        """
        Discover candidate posts for a query.

        Args:
            query: Free-text search query
            limit: Maximum candidates to request from the provider

        Returns:
            List of candidates, possibly empty
        """
        pass

    @abstractmethod
    def get_metadata(self) -> SourceMetadata:
        pass

    @abstractmethod
    def health_check(self) -> Dict[str, Any]:
        """
        Report whether the source's providers are configured.

        Returns:
            Health status dictionary
        """
        pass
