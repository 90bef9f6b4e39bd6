"""
Record store backends.
"""

from .record_store import RecordStore, SEARCHES_TABLE, IMAGES_TABLE
from .memory_store import InMemoryRecordStore
from .connection import get_record_store

__all__ = [
    'RecordStore', 'SEARCHES_TABLE', 'IMAGES_TABLE',
    'InMemoryRecordStore', 'get_record_store',
]
