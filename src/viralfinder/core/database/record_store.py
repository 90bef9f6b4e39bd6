#!/usr/bin/env python3
"""
Record store interface.

The pipeline persists searches and accepted images through this interface and
treats every call as fallible.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional

from ..models import SearchRecord, SearchStatus, ViralImage

SEARCHES_TABLE = "viral_searches"
IMAGES_TABLE = "viral_images"

DEFAULT_RECENT_LIMIT = 20


class RecordStore(ABC):
    """Storage for search records and their accepted images."""

    @abstractmethod
    def create_search(self, query: str) -> SearchRecord:
        """
        Create a search record in the processing state.

        Returns:
            The stored record, with its identity assigned

        Raises:
            RecordStoreError: If the record cannot be created
        """
        pass

    @abstractmethod
    def finalize_search(self, search_id: int, status: SearchStatus, total_results: int = 0) -> None:
        """Move a search to a terminal state and stamp its completion time."""
        pass

    @abstractmethod
    def insert_image(self, image: ViralImage) -> ViralImage:
        """
        Persist an accepted image.

        Returns:
            The stored image with its identity assigned
        """
        pass

    @abstractmethod
    def get_search(self, search_id: int) -> Optional[SearchRecord]:
        pass

    @abstractmethod
    def list_images_by_search(self, search_id: int) -> List[ViralImage]:
        """Images for a search, highest engagement score first."""
        pass

    @abstractmethod
    def list_recent_searches(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[SearchRecord]:
        """Searches ordered by creation time, newest first."""
        pass

    @abstractmethod
    def health_check(self) -> Dict[str, Any]:
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass
