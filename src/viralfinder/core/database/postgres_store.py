#!/usr/bin/env python3
"""
Direct PostgreSQL record store.
"""

import logging
from typing import List, Dict, Any, Optional

import psycopg

from ..exceptions import RecordStoreOperationError
from ..models import SearchRecord, SearchStatus, ViralImage
from .connection_manager import ConnectionManager
from .record_store import RecordStore, SEARCHES_TABLE, IMAGES_TABLE, DEFAULT_RECENT_LIMIT

logger = logging.getLogger(__name__)

IMAGE_COLUMNS = (
    'search_id', 'image_url', 'post_url', 'platform', 'title', 'description',
    'engagement_score', 'views_estimate', 'likes_estimate', 'comments_estimate',
    'shares_estimate', 'author', 'author_followers', 'post_date', 'hashtags',
    'image_path', 'screenshot_path',
)


class PostgresRecordStore(RecordStore):
    """Record store using psycopg through a ConnectionManager."""

    def __init__(self, connection_manager: ConnectionManager):
        self.connection_manager = connection_manager

    @classmethod
    def from_config(cls, database_config) -> 'PostgresRecordStore':
        return cls(ConnectionManager(database_config))

    def _fetch(self, operation: str, table: str, sql: str, params: tuple = (), many: bool = False):
        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute(sql, params)
                if many:
                    return cursor.fetchall()
                return cursor.fetchone() if cursor.description else None
        except psycopg.Error as e:
            logger.error(f"Database {operation} on {table} failed: {e}")
            raise RecordStoreOperationError(operation, table, e) from e

    def create_search(self, query: str) -> SearchRecord:
        row = self._fetch(
            "insert", SEARCHES_TABLE,
            f"""
            INSERT INTO {SEARCHES_TABLE} (query, status, total_results)
            VALUES (%s, %s, 0)
            RETURNING *
            """,
            (query, SearchStatus.PROCESSING.value),
        )
        return SearchRecord.from_dict(row)

    def finalize_search(self, search_id: int, status: SearchStatus, total_results: int = 0) -> None:
        self._fetch(
            "update", SEARCHES_TABLE,
            f"""
            UPDATE {SEARCHES_TABLE}
            SET status = %s, total_results = %s, updated_at = NOW(), completed_at = NOW()
            WHERE id = %s
            """,
            (status.value, total_results, search_id),
        )

    def get_search(self, search_id: int) -> Optional[SearchRecord]:
        row = self._fetch("select", SEARCHES_TABLE, f"SELECT * FROM {SEARCHES_TABLE} WHERE id = %s", (search_id,))
        return SearchRecord.from_dict(row) if row else None

    def list_recent_searches(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[SearchRecord]:
        rows = self._fetch(
            "select", SEARCHES_TABLE,
            f"SELECT * FROM {SEARCHES_TABLE} ORDER BY created_at DESC LIMIT %s",
            (limit,), many=True,
        )
        return [SearchRecord.from_dict(row) for row in rows]

    def insert_image(self, image: ViralImage) -> ViralImage:
        record = image.to_record()
        placeholders = ", ".join(["%s"] * len(IMAGE_COLUMNS))
        row = self._fetch(
            "insert", IMAGES_TABLE,
            f"""
            INSERT INTO {IMAGES_TABLE} ({", ".join(IMAGE_COLUMNS)})
            VALUES ({placeholders})
            RETURNING *
            """,
            tuple(record[column] for column in IMAGE_COLUMNS),
        )
        return ViralImage.from_dict(row)

    def list_images_by_search(self, search_id: int) -> List[ViralImage]:
        rows = self._fetch(
            "select", IMAGES_TABLE,
            f"SELECT * FROM {IMAGES_TABLE} WHERE search_id = %s ORDER BY engagement_score DESC",
            (search_id,), many=True,
        )
        return [ViralImage.from_dict(row) for row in rows]

    def health_check(self) -> Dict[str, Any]:
        status = self.connection_manager.health_check()
        status['backend'] = 'postgres'
        return status

    def close(self) -> None:
        self.connection_manager.close()
