#!/usr/bin/env python3
"""
Summary and result aggregate models.

Summaries are derived on every read and never persisted.
"""

from typing import List, Dict, Any
from dataclasses import dataclass, field

from .search import SearchRecord
from .image import ViralImage


@dataclass(frozen=True)
class AuthorStats:
    """Per-author aggregate used in the top-authors list."""
    author: str
    followers: int
    posts_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'author': self.author,
            'followers': self.followers,
            'posts_count': self.posts_count,
        }


@dataclass(frozen=True)
class Summary:
    """Aggregate statistics over an accepted image set."""
    total_images: int = 0
    avg_engagement: float = 0.0
    platform_distribution: Dict[str, int] = field(default_factory=dict)
    top_authors: List[AuthorStats] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_images': self.total_images,
            'avg_engagement': self.avg_engagement,
            'platform_distribution': dict(self.platform_distribution),
            'top_authors': [author.to_dict() for author in self.top_authors],
        }


@dataclass
class SearchResults:
    """Search record + images + summary, as handed to the presentation layer."""
    search: SearchRecord
    images: List[ViralImage]
    summary: Summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            'search': self.search.to_dict(),
            'images': [image.to_dict() for image in self.images],
            'summary': self.summary.to_dict(),
        }
