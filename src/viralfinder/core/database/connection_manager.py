#!/usr/bin/env python3
"""
Database Connection Manager

Handles direct PostgreSQL connections with lifecycle management and
reconnect on failure.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Optional, Dict, Any

import psycopg
from psycopg.rows import dict_row

from ..exceptions import RecordStoreConnectionError

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages a single autocommit connection shared by worker threads."""

    def __init__(self, config):
        """
        Initialize connection manager with configuration.

        Args:
            config: DatabaseConfig with supabase_url, supabase_db_password
                and connection_timeout
        """
        self.config = config
        self.connection: Optional[psycopg.Connection] = None
        self._lock = threading.RLock()
        self._connect()

    def _build_connection_string(self) -> str:
        """Build PostgreSQL connection string from configuration."""
        url = self.config.supabase_url or ''
        password = self.config.supabase_db_password

        if not url.startswith('https://'):
            raise RecordStoreConnectionError("postgres", ValueError(f"Invalid Supabase URL format: {url}"))
        if not password:
            raise RecordStoreConnectionError("postgres", ValueError("SUPABASE_DB_PASSWORD is not set"))

        host = url.replace('https://', '').rstrip('/')

        # Pooler port
        return f"postgresql://postgres:{password}@{host}:6543/postgres?sslmode=require"

    def _connect(self) -> None:
        """Establish database connection."""
        connection_string = self._build_connection_string()
        try:
            self.connection = psycopg.connect(
                connection_string,
                row_factory=dict_row,
                autocommit=True,
                connect_timeout=self.config.connection_timeout
            )
            logger.debug("Database connection established")
        except psycopg.Error as e:
            raise RecordStoreConnectionError("postgres", e) from e

    def ensure_connection(self) -> None:
        """Ensure database connection is active, reconnect if needed."""
        try:
            if not self.connection or self.connection.closed:
                self._connect()
            else:
                with self.connection.cursor() as cursor:
                    cursor.execute("SELECT 1")
        except psycopg.Error:
            logger.warning("Connection test failed, reconnecting...")
            self._connect()

    @contextmanager
    def get_cursor(self):
        """
        Get database cursor as context manager.

        Yields:
            Database cursor (rows as dicts)
        """
        with self._lock:
            self.ensure_connection()
            with self.connection.cursor() as cursor:
                yield cursor

    def close(self) -> None:
        """Close database connection."""
        if self.connection and not self.connection.closed:
            self.connection.close()
            logger.debug("Database connection closed")

    def health_check(self) -> Dict[str, Any]:
        """
        Perform health check on database connection.

        Returns:
            Health status information
        """
        try:
            with self.get_cursor() as cursor:
                cursor.execute("SELECT 1 as test")
                result = cursor.fetchone()

                cursor.execute("SELECT version() as version")
                version_info = cursor.fetchone()

                return {
                    'connected': True,
                    'test_query': result['test'] == 1,
                    'version': version_info['version'],
                }
        except (psycopg.Error, RecordStoreConnectionError) as e:
            logger.error(f"Database health check failed: {e}")
            return {
                'connected': False,
                'error': str(e)
            }

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
