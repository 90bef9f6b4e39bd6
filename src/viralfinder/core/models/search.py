#!/usr/bin/env python3
"""
Search request and search record models.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional, Tuple, Iterable
from dataclasses import dataclass, field

from dateutil import parser as date_parser

from ..exceptions import ValidationError

MAX_IMAGES_LIMIT = 50
DEFAULT_MAX_IMAGES = 20


class Platform(str, Enum):
    """Social platforms the finder can discover content on."""
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"


class SearchStatus(str, Enum):
    """Lifecycle of a search record."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SearchStatus.COMPLETED, SearchStatus.FAILED)


def _parse_datetime_safe(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError, TypeError):
        return None


@dataclass(frozen=True)
class SearchRequest:
    """
    Validated, immutable search input.

    Platforms are de-duplicated while keeping the caller's order, so
    per-platform limits stay deterministic.
    """
    query: str
    max_images: int = DEFAULT_MAX_IMAGES
    min_engagement: float = 0
    platforms: Tuple[Platform, ...] = (Platform.INSTAGRAM, Platform.FACEBOOK)

    def __post_init__(self):
        query = (self.query or "").strip() if isinstance(self.query, str) else ""
        if not query:
            raise ValidationError('query', self.query, "non-empty text")
        object.__setattr__(self, 'query', query)

        if isinstance(self.max_images, bool) or not isinstance(self.max_images, int) \
                or not 1 <= self.max_images <= MAX_IMAGES_LIMIT:
            raise ValidationError('max_images', self.max_images, f"integer between 1 and {MAX_IMAGES_LIMIT}")

        if isinstance(self.min_engagement, bool) or not isinstance(self.min_engagement, (int, float)) \
                or self.min_engagement < 0:
            raise ValidationError('min_engagement', self.min_engagement, "number >= 0")

        object.__setattr__(self, 'platforms', self._normalize_platforms(self.platforms))

    @staticmethod
    def _normalize_platforms(platforms: Iterable[Any]) -> Tuple[Platform, ...]:
        if isinstance(platforms, (str, Platform)):
            platforms = [platforms]

        normalized = []
        for value in platforms or []:
            try:
                platform = Platform(value)
            except ValueError:
                raise ValidationError('platforms', value, "one of: instagram, facebook")
            if platform not in normalized:
                normalized.append(platform)

        if not normalized:
            raise ValidationError('platforms', list(platforms or []), "at least one platform")
        return tuple(normalized)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchRequest':
        """Create a request from a JSON-like payload, applying defaults."""
        kwargs: Dict[str, Any] = {'query': data.get('query', '')}
        if data.get('max_images') is not None:
            kwargs['max_images'] = data['max_images']
        if data.get('min_engagement') is not None:
            kwargs['min_engagement'] = data['min_engagement']
        if data.get('platforms') is not None:
            kwargs['platforms'] = data['platforms']
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'query': self.query,
            'max_images': self.max_images,
            'min_engagement': self.min_engagement,
            'platforms': [platform.value for platform in self.platforms],
        }


@dataclass
class SearchRecord:
    """Persistent record of one search run."""
    id: int
    query: str
    status: SearchStatus = SearchStatus.PROCESSING
    total_results: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'query': self.query,
            'status': self.status.value,
            'total_results': self.total_results,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchRecord':
        return cls(
            id=int(data['id']),
            query=data.get('query', ''),
            status=SearchStatus(data.get('status', SearchStatus.PENDING.value)),
            total_results=int(data.get('total_results') or 0),
            created_at=_parse_datetime_safe(data.get('created_at')) or datetime.now(timezone.utc),
            updated_at=_parse_datetime_safe(data.get('updated_at')),
            completed_at=_parse_datetime_safe(data.get('completed_at')),
        )

    def __repr__(self):
        return f"SearchRecord(id={self.id}, query='{self.query}', status='{self.status.value}')"
