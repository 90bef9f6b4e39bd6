#!/usr/bin/env python3
"""
ViralImage data model.

The persisted/output entity: display fields from the candidate, real counts
(or AI estimates when the provider gave none) and the computed score.
"""

import json
from datetime import datetime, timezone
from typing import Dict, Any, Optional, FrozenSet
from dataclasses import dataclass, field

from dateutil import parser as date_parser

from .search import Platform

DEFAULT_TITLE = "Viral Content"
DEFAULT_AUTHOR = "Unknown"

# Author value the fallback analysis assigns when nothing identifies the creator.
UNKNOWN_AUTHOR = "unknown_creator"

_PLACEHOLDER_AUTHORS = frozenset({UNKNOWN_AUTHOR.lower(), DEFAULT_AUTHOR.lower()})


def is_placeholder_author(author: Optional[str]) -> bool:
    """True when the author carries no real identity."""
    return not author or author.strip().lower() in _PLACEHOLDER_AUTHORS


def _decode_hashtags(value: Any) -> FrozenSet[str]:
    if not value:
        return frozenset()
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return frozenset()
    if not isinstance(value, (list, tuple, set, frozenset)):
        return frozenset()
    return frozenset(str(tag) for tag in value if tag)


def _parse_post_date(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError, TypeError):
        return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ViralImage:
    """A scored, accepted post. Never mutated after creation."""
    search_id: int
    image_url: str
    post_url: str
    platform: Platform
    engagement_score: int
    title: str = DEFAULT_TITLE
    description: str = ""
    views_estimate: int = 0
    likes_estimate: int = 0
    comments_estimate: int = 0
    shares_estimate: int = 0
    author: str = DEFAULT_AUTHOR
    author_followers: int = 0
    post_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    hashtags: FrozenSet[str] = field(default_factory=frozenset)
    image_path: Optional[str] = None
    screenshot_path: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_record(self) -> Dict[str, Any]:
        """Row representation for the record store (hashtags as JSON text)."""
        return {
            'search_id': self.search_id,
            'image_url': self.image_url,
            'post_url': self.post_url,
            'platform': self.platform.value,
            'title': self.title,
            'description': self.description,
            'engagement_score': self.engagement_score,
            'views_estimate': self.views_estimate,
            'likes_estimate': self.likes_estimate,
            'comments_estimate': self.comments_estimate,
            'shares_estimate': self.shares_estimate,
            'author': self.author,
            'author_followers': self.author_followers,
            'post_date': self.post_date.isoformat(),
            'hashtags': json.dumps(sorted(self.hashtags), ensure_ascii=False),
            'image_path': self.image_path,
            'screenshot_path': self.screenshot_path,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Output representation (hashtags as a list)."""
        data = self.to_record()
        data['hashtags'] = sorted(self.hashtags)
        data['id'] = self.id
        data['created_at'] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ViralImage':
        """Create from a stored row; hashtags may be JSON text or a list."""
        created_at = data.get('created_at')
        if created_at and not isinstance(created_at, datetime):
            created_at = _parse_post_date(created_at)

        return cls(
            id=data.get('id'),
            search_id=int(data['search_id']),
            image_url=data.get('image_url') or '',
            post_url=data.get('post_url') or '',
            platform=Platform(data['platform']),
            engagement_score=int(data.get('engagement_score') or 0),
            title=data.get('title') or DEFAULT_TITLE,
            description=data.get('description') or '',
            views_estimate=int(data.get('views_estimate') or 0),
            likes_estimate=int(data.get('likes_estimate') or 0),
            comments_estimate=int(data.get('comments_estimate') or 0),
            shares_estimate=int(data.get('shares_estimate') or 0),
            author=data.get('author') or DEFAULT_AUTHOR,
            author_followers=int(data.get('author_followers') or 0),
            post_date=_parse_post_date(data.get('post_date')),
            hashtags=_decode_hashtags(data.get('hashtags')),
            image_path=data.get('image_path'),
            screenshot_path=data.get('screenshot_path'),
            created_at=created_at or None,
        )

    def __repr__(self):
        return f"ViralImage(platform='{self.platform.value}', score={self.engagement_score}, post_url='{self.post_url}')"
