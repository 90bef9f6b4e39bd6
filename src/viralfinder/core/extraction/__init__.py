"""
Metrics extraction from provider payloads.
"""

from .metrics_extractor import MetricsExtractor, extract_caption_hashtags, normalize_timestamp

__all__ = ['MetricsExtractor', 'extract_caption_hashtags', 'normalize_timestamp']
