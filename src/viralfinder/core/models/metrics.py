#!/usr/bin/env python3
"""
Engagement data models.

NormalizedMetrics holds facts read from a provider payload; AIAnalysis holds
what the inference provider (or the fallback estimator) believes about a post.
"""

from datetime import datetime, timezone
from typing import List, Dict, Any, FrozenSet
from dataclasses import dataclass, field


def _non_negative_int(value: Any) -> int:
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, number)


def _clamped_score(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return max(0.0, min(100.0, number))


@dataclass
class NormalizedMetrics:
    """Platform-agnostic metrics extracted from a raw payload."""
    views: int = 0
    likes: int = 0
    comments: int = 0
    shares: int = 0
    author: str = ""
    author_followers: int = 0
    post_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    hashtags: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        self.views = _non_negative_int(self.views)
        self.likes = _non_negative_int(self.likes)
        self.comments = _non_negative_int(self.comments)
        self.shares = _non_negative_int(self.shares)
        self.author_followers = _non_negative_int(self.author_followers)
        self.author = (self.author or "").strip() if isinstance(self.author, str) else ""
        self.hashtags = frozenset(tag for tag in self.hashtags if tag)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'views': self.views,
            'likes': self.likes,
            'comments': self.comments,
            'shares': self.shares,
            'author': self.author,
            'author_followers': self.author_followers,
            'post_date': self.post_date.isoformat(),
            'hashtags': sorted(self.hashtags),
        }


@dataclass
class AIAnalysis:
    """AI-derived estimates for a candidate. Always present, real or fallback."""
    estimated_likes: int = 0
    estimated_comments: int = 0
    estimated_shares: int = 0
    estimated_views: int = 0
    estimated_followers: int = 0
    engagement_score: float = 0.0
    content_quality: float = 0.0
    hashtags: List[str] = field(default_factory=list)
    viral_factors: List[str] = field(default_factory=list)
    suggested_title: str = ""
    description: str = ""
    author: str = ""
    is_fallback: bool = False

    def __post_init__(self):
        self.estimated_likes = _non_negative_int(self.estimated_likes)
        self.estimated_comments = _non_negative_int(self.estimated_comments)
        self.estimated_shares = _non_negative_int(self.estimated_shares)
        self.estimated_views = _non_negative_int(self.estimated_views)
        self.estimated_followers = _non_negative_int(self.estimated_followers)
        self.engagement_score = _clamped_score(self.engagement_score)
        self.content_quality = _clamped_score(self.content_quality)
        self.hashtags = [str(tag).lstrip('#') for tag in (self.hashtags or []) if tag]
        self.viral_factors = [str(factor) for factor in (self.viral_factors or []) if factor]
        self.suggested_title = str(self.suggested_title or "").strip()
        self.description = str(self.description or "").strip()
        self.author = str(self.author or "").strip()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AIAnalysis':
        """Build from the JSON object returned by the inference provider."""
        hashtags = data.get('hashtags') or []
        viral_factors = data.get('viral_factors') or []
        return cls(
            estimated_likes=data.get('estimated_likes', 0),
            estimated_comments=data.get('estimated_comments', 0),
            estimated_shares=data.get('estimated_shares', 0),
            estimated_views=data.get('estimated_views', 0),
            estimated_followers=data.get('estimated_followers', 0),
            engagement_score=data.get('engagement_score', 0),
            content_quality=data.get('content_quality', 0),
            hashtags=hashtags if isinstance(hashtags, list) else [hashtags],
            viral_factors=viral_factors if isinstance(viral_factors, list) else [viral_factors],
            suggested_title=data.get('suggested_title', ''),
            description=data.get('description', ''),
            author=data.get('author', ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'estimated_likes': self.estimated_likes,
            'estimated_comments': self.estimated_comments,
            'estimated_shares': self.estimated_shares,
            'estimated_views': self.estimated_views,
            'estimated_followers': self.estimated_followers,
            'engagement_score': self.engagement_score,
            'content_quality': self.content_quality,
            'hashtags': list(self.hashtags),
            'viral_factors': list(self.viral_factors),
            'suggested_title': self.suggested_title,
            'description': self.description,
            'author': self.author,
        }
