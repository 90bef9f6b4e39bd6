#!/usr/bin/env python3
"""
Engagement scoring.

Combines real metrics with the AI analysis into a single 0-100 integer.
Real counters weigh most; each term is capped on its own.
"""

import math
import logging

from .models import NormalizedMetrics, AIAnalysis

logger = logging.getLogger(__name__)

DEFAULT_SCORE = 30
MAX_SCORE = 100

LIKES_DIVISOR, LIKES_CAP = 100, 30
COMMENTS_DIVISOR, COMMENTS_CAP = 10, 20
VIEWS_DIVISOR, VIEWS_CAP = 1000, 25
AI_WEIGHT = 0.25
QUALITY_THRESHOLD, QUALITY_BONUS = 70, 10
HASHTAG_THRESHOLD, HASHTAG_BONUS = 3, 5


def _capped_term(value: float, divisor: float, cap: float) -> float:
    if not value or value <= 0:
        return 0.0
    return min(value / divisor, cap)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ScoreCalculator:
    """Pure engagement score calculator."""

    def score(self, metrics: NormalizedMetrics, analysis: AIAnalysis) -> int:
        """
        Calculate the engagement score.

        Args:
            metrics: Real metrics extracted from the provider payload
            analysis: AI (or fallback) analysis of the same post

        Returns:
            Integer in [0, 100]; DEFAULT_SCORE if anything goes wrong
        """
        try:
            total = 0.0
            total += _capped_term(metrics.likes, LIKES_DIVISOR, LIKES_CAP)
            total += _capped_term(metrics.comments, COMMENTS_DIVISOR, COMMENTS_CAP)
            total += _capped_term(metrics.views, VIEWS_DIVISOR, VIEWS_CAP)

            ai_score = analysis.engagement_score or 0
            if ai_score > 0:
                total += ai_score * AI_WEIGHT

            if analysis.content_quality > QUALITY_THRESHOLD:
                total += QUALITY_BONUS

            if len(metrics.hashtags) > HASHTAG_THRESHOLD:
                total += HASHTAG_BONUS

            return max(0, min(_round_half_up(total), MAX_SCORE))

        except Exception as e:
            logger.error(f"Error calculating engagement score: {e}")
            return DEFAULT_SCORE
