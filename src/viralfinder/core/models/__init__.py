#!/usr/bin/env python3
"""
Core data models for viral content search.

Contains all data structures used throughout the application.
"""

from .search import Platform, SearchStatus, SearchRequest, SearchRecord
from .candidate import Candidate, RawPayload
from .metrics import NormalizedMetrics, AIAnalysis
from .image import ViralImage, DEFAULT_AUTHOR, DEFAULT_TITLE, UNKNOWN_AUTHOR, is_placeholder_author
from .summary import AuthorStats, Summary, SearchResults
from .outcome import CandidateOutcome, SkipReason

__all__ = [
    'Platform', 'SearchStatus', 'SearchRequest', 'SearchRecord',
    'Candidate', 'RawPayload',
    'NormalizedMetrics', 'AIAnalysis',
    'ViralImage', 'DEFAULT_AUTHOR', 'DEFAULT_TITLE', 'UNKNOWN_AUTHOR', 'is_placeholder_author',
    'AuthorStats', 'Summary', 'SearchResults',
    'CandidateOutcome', 'SkipReason',
]
