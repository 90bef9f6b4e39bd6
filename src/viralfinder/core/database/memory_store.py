#!/usr/bin/env python3
"""
In-process record store.

Default backend when no database is configured. Safe for concurrent inserts
from the pipeline's worker threads.
"""

import logging
import threading
import dataclasses
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

from ..models import SearchRecord, SearchStatus, ViralImage
from ..exceptions import RecordStoreOperationError
from .record_store import RecordStore, DEFAULT_RECENT_LIMIT, IMAGES_TABLE

logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    """Keeps searches and images in dictionaries guarded by a lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._searches: Dict[int, SearchRecord] = {}
        self._images: Dict[int, List[ViralImage]] = {}
        self._next_search_id = 1
        self._next_image_id = 1
        logger.debug("In-memory record store initialized")

    def create_search(self, query: str) -> SearchRecord:
        with self._lock:
            now = datetime.now(timezone.utc)
            record = SearchRecord(
                id=self._next_search_id,
                query=query,
                status=SearchStatus.PROCESSING,
                total_results=0,
                created_at=now,
                updated_at=now,
            )
            self._searches[record.id] = record
            self._images[record.id] = []
            self._next_search_id += 1
        return dataclasses.replace(record)

    def finalize_search(self, search_id: int, status: SearchStatus, total_results: int = 0) -> None:
        with self._lock:
            record = self._searches.get(search_id)
            if record is None:
                logger.warning(f"Cannot finalize unknown search {search_id}")
                return
            now = datetime.now(timezone.utc)
            record.status = status
            record.total_results = total_results
            record.updated_at = now
            record.completed_at = now

    def insert_image(self, image: ViralImage) -> ViralImage:
        with self._lock:
            if image.search_id not in self._searches:
                raise RecordStoreOperationError("insert", IMAGES_TABLE, KeyError(f"search {image.search_id} does not exist"))
            stored = dataclasses.replace(image, id=self._next_image_id, created_at=datetime.now(timezone.utc))
            self._next_image_id += 1
            self._images[image.search_id].append(stored)
        return stored

    def get_search(self, search_id: int) -> Optional[SearchRecord]:
        with self._lock:
            record = self._searches.get(search_id)
            return dataclasses.replace(record) if record else None

    def list_images_by_search(self, search_id: int) -> List[ViralImage]:
        with self._lock:
            images = list(self._images.get(search_id, []))
        return sorted(images, key=lambda image: image.engagement_score, reverse=True)

    def list_recent_searches(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[SearchRecord]:
        with self._lock:
            records = [dataclasses.replace(record) for record in self._searches.values()]
        records.sort(key=lambda record: (record.created_at, record.id), reverse=True)
        return records[:limit]

    def health_check(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'connected': True,
                'backend': 'memory',
                'searches': len(self._searches),
                'images': sum(len(images) for images in self._images.values()),
            }
