#!/usr/bin/env python3
"""
Record store selection.

Single entry point that builds the configured backend, falling back to the
in-memory store when a remote backend cannot be reached.
"""

import logging

from ..exceptions import RecordStoreError
from .record_store import RecordStore
from .memory_store import InMemoryRecordStore

logger = logging.getLogger(__name__)


def get_record_store(config) -> RecordStore:
    """
    Build the record store named by config.database.backend.

    Priority:
    1. The configured backend (supabase or postgres)
    2. In-memory store if that backend fails outside production

    Raises:
        RecordStoreError: If the configured backend fails in production
    """
    backend = config.database.backend

    if backend == 'memory':
        return InMemoryRecordStore()

    try:
        if backend == 'supabase':
            from .supabase_store import SupabaseRecordStore
            logger.info("Using Supabase REST API record store")
            return SupabaseRecordStore.from_config(config.database)

        from .postgres_store import PostgresRecordStore
        logger.info("Attempting direct PostgreSQL connection")
        return PostgresRecordStore.from_config(config.database)
    except RecordStoreError as e:
        if config.is_production():
            logger.error(f"Record store '{backend}' unavailable in production: {e}")
            raise
        logger.warning(f"Record store '{backend}' unavailable, using in-memory store: {e}")
        return InMemoryRecordStore()
