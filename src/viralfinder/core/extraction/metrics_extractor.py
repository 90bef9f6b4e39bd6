#!/usr/bin/env python3
"""
Metrics extraction from provider payloads.

Maps provider-specific raw payloads onto NormalizedMetrics. Extraction is
total: a missing payload or a malformed field yields defaults, never an error.
"""

import re
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Set

from dateutil import parser as date_parser

from ..models import NormalizedMetrics, RawPayload, Platform

logger = logging.getLogger(__name__)

# Numeric epochs above this are milliseconds, otherwise seconds
MILLISECOND_EPOCH_THRESHOLD = 10_000_000_000

MIN_PLAUSIBLE_YEAR = 2000
MAX_PLAUSIBLE_YEAR = 2030

HASHTAG_PATTERN = re.compile(r'#[\w\u00c0-\u024f\u1e00-\u1eff]+', re.IGNORECASE)


def _first_present(data: Dict[str, Any], *keys: str, default: Any = 0) -> Any:
    """Return the first truthy value among keys."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return default


def extract_caption_hashtags(caption: str) -> Set[str]:
    """Collect '#tag' tokens from a caption, without the leading '#'."""
    if not caption or not isinstance(caption, str):
        return set()
    return {match[1:] for match in HASHTAG_PATTERN.findall(caption)}


def normalize_timestamp(value: Any, now: Optional[datetime] = None) -> datetime:
    """
    Turn a provider timestamp into an aware datetime.

    Accepts ISO-like strings and numeric epochs (seconds or milliseconds).
    Unparseable or implausible values (year outside 2000-2030) fall back to now.
    """
    now = now or datetime.now(timezone.utc)

    try:
        if isinstance(value, bool):
            raise TypeError(f"unsupported timestamp type: {type(value).__name__}")
        if isinstance(value, (int, float)):
            seconds = value / 1000 if value > MILLISECOND_EPOCH_THRESHOLD else value
            parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
        elif isinstance(value, str):
            parsed = date_parser.parse(value)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
        else:
            raise TypeError(f"unsupported timestamp type: {type(value).__name__}")
    except (ValueError, OverflowError, OSError, TypeError) as e:
        logger.warning(f"Invalid timestamp {value!r} ({e}), using current time")
        return now

    if not MIN_PLAUSIBLE_YEAR <= parsed.year <= MAX_PLAUSIBLE_YEAR:
        logger.warning(f"Unreasonable timestamp {value!r} (year {parsed.year}), using current time")
        return now

    return parsed


class MetricsExtractor:
    """Normalizes raw provider payloads into platform-agnostic metrics."""

    def __init__(self):
        self._extractors: Dict[Platform, Callable[[Dict[str, Any], Dict[str, Any]], None]] = {
            Platform.INSTAGRAM: self._extract_instagram,
        }

    def extract(self, raw: Optional[RawPayload], platform: Platform) -> NormalizedMetrics:
        """
        Extract normalized metrics from a raw payload.

        Args:
            raw: Tagged provider payload, or None when discovery had no structured data
            platform: Platform the candidate was discovered on

        Returns:
            NormalizedMetrics with every field populated
        """
        if raw is None or not raw.data:
            return NormalizedMetrics()

        fields: Dict[str, Any] = {'hashtags': set()}

        try:
            # The payload tag decides the field layout, not the requested platform
            extractor = self._extractors.get(raw.platform)
            if extractor is None:
                # Web search results carry no engagement counters
                logger.debug(f"No field mapping for {raw.platform.value} payloads")
            else:
                extractor(raw.data, fields)

            caption = raw.data.get('caption')
            if caption:
                fields['hashtags'] = set(fields['hashtags']) | extract_caption_hashtags(caption)

            return NormalizedMetrics(**fields)

        except Exception as e:
            logger.error(f"Error extracting metrics for {platform.value} payload: {e}")
            partial = {key: value for key, value in fields.items() if key != 'post_date'}
            try:
                return NormalizedMetrics(**partial)
            except Exception:  # noqa: BLE001
                return NormalizedMetrics()

    def _extract_instagram(self, data: Dict[str, Any], fields: Dict[str, Any]) -> None:
        """Field mapping for Instagram scraper items."""
        fields['likes'] = _first_present(data, 'likesCount', 'likes')
        fields['comments'] = _first_present(data, 'commentsCount', 'comments')
        fields['views'] = _first_present(data, 'videoViewCount', 'viewsCount')
        fields['author'] = _first_present(data, 'ownerUsername', 'username', default='')
        fields['author_followers'] = data.get('ownerFollowersCount') or 0

        hashtags = data.get('hashtags')
        if isinstance(hashtags, list):
            fields['hashtags'] = {str(tag) for tag in hashtags if tag}

        timestamp = _first_present(data, 'takenAtTimestamp', 'timestamp', default=None)
        if timestamp:
            fields['post_date'] = normalize_timestamp(timestamp)
