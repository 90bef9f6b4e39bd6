#!/usr/bin/env python3
"""
Supabase REST API record store.

Uses the Supabase REST API over HTTPS, which works on networks that block
direct PostgreSQL ports.
"""

import logging
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

from supabase import create_client, Client

from ..exceptions import RecordStoreConnectionError, RecordStoreOperationError
from ..models import SearchRecord, SearchStatus, ViralImage
from .record_store import RecordStore, SEARCHES_TABLE, IMAGES_TABLE, DEFAULT_RECENT_LIMIT

logger = logging.getLogger(__name__)


class SupabaseRecordStore(RecordStore):
    """Record store backed by the Supabase REST API."""

    def __init__(self, supabase_url: Optional[str] = None, supabase_key: Optional[str] = None,
                 client: Optional[Client] = None):
        """
        Initialize Supabase client.

        Args:
            supabase_url: Project URL
            supabase_key: Service key (preferred) or anon key
            client: Pre-built client, bypassing URL/key
        """
        self.client = client or self._create_client(supabase_url, supabase_key)
        logger.info("Supabase record store initialized")

    @staticmethod
    def _create_client(supabase_url: Optional[str], supabase_key: Optional[str]) -> Client:
        if not supabase_url or not supabase_key:
            raise RecordStoreConnectionError(
                "supabase_api", ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY/SUPABASE_ANON_KEY are required")
            )
        try:
            return create_client(supabase_url, supabase_key)
        except Exception as e:
            raise RecordStoreConnectionError("supabase_api", e) from e

    @classmethod
    def from_config(cls, database_config) -> 'SupabaseRecordStore':
        return cls(database_config.supabase_url, database_config.supabase_key)

    # Search operations

    def create_search(self, query: str) -> SearchRecord:
        try:
            result = (self.client.table(SEARCHES_TABLE)
                      .insert({
                          'query': query,
                          'status': SearchStatus.PROCESSING.value,
                          'total_results': 0,
                      })
                      .execute())
        except Exception as e:
            logger.error(f"Failed to create search via API: {e}")
            raise RecordStoreOperationError("insert", SEARCHES_TABLE, e) from e

        if not result.data:
            raise RecordStoreOperationError("insert", SEARCHES_TABLE, ValueError("no row returned"))
        return SearchRecord.from_dict(result.data[0])

    def finalize_search(self, search_id: int, status: SearchStatus, total_results: int = 0) -> None:
        now = datetime.now(timezone.utc).isoformat()
        try:
            (self.client.table(SEARCHES_TABLE)
             .update({
                 'status': status.value,
                 'total_results': total_results,
                 'updated_at': now,
                 'completed_at': now,
             })
             .eq('id', search_id)
             .execute())
        except Exception as e:
            logger.error(f"Failed to finalize search {search_id} via API: {e}")
            raise RecordStoreOperationError("update", SEARCHES_TABLE, e) from e

    def get_search(self, search_id: int) -> Optional[SearchRecord]:
        try:
            result = (self.client.table(SEARCHES_TABLE)
                      .select('*')
                      .eq('id', search_id)
                      .limit(1)
                      .execute())
        except Exception as e:
            raise RecordStoreOperationError("select", SEARCHES_TABLE, e) from e

        return SearchRecord.from_dict(result.data[0]) if result.data else None

    def list_recent_searches(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[SearchRecord]:
        try:
            result = (self.client.table(SEARCHES_TABLE)
                      .select('*')
                      .order('created_at', desc=True)
                      .limit(limit)
                      .execute())
        except Exception as e:
            raise RecordStoreOperationError("select", SEARCHES_TABLE, e) from e

        return [SearchRecord.from_dict(row) for row in result.data or []]

    # Image operations

    def insert_image(self, image: ViralImage) -> ViralImage:
        try:
            result = (self.client.table(IMAGES_TABLE)
                      .insert(image.to_record())
                      .execute())
        except Exception as e:
            raise RecordStoreOperationError("insert", IMAGES_TABLE, e) from e

        if not result.data:
            raise RecordStoreOperationError("insert", IMAGES_TABLE, ValueError("no row returned"))
        return ViralImage.from_dict(result.data[0])

    def list_images_by_search(self, search_id: int) -> List[ViralImage]:
        try:
            result = (self.client.table(IMAGES_TABLE)
                      .select('*')
                      .eq('search_id', search_id)
                      .order('engagement_score', desc=True)
                      .execute())
        except Exception as e:
            raise RecordStoreOperationError("select", IMAGES_TABLE, e) from e

        return [ViralImage.from_dict(row) for row in result.data or []]

    def health_check(self) -> Dict[str, Any]:
        """Check API connectivity with a minimal query."""
        try:
            self.client.table(SEARCHES_TABLE).select('id').limit(1).execute()
            return {'connected': True, 'backend': 'supabase'}
        except Exception as e:
            logger.error(f"Supabase health check failed: {e}")
            return {'connected': False, 'backend': 'supabase', 'error': str(e)}
