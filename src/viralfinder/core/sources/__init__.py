"""
Platform content sources.
"""

from .base import ContentSource, SourceMetadata
from .instagram import InstagramSource
from .facebook import FacebookSource
from .registry import SourceRegistry, build_default_registry

__all__ = [
    'ContentSource', 'SourceMetadata',
    'InstagramSource', 'FacebookSource',
    'SourceRegistry', 'build_default_registry',
]
