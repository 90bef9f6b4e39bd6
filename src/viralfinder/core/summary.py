#!/usr/bin/env python3
"""
Summary aggregation over a finished image set.
"""

from typing import Dict, List, Sequence

from .models import ViralImage, Summary, AuthorStats, is_placeholder_author

TOP_AUTHORS_LIMIT = 5


class SummaryAggregator:
    """Computes derived statistics; stateless and safe to call repeatedly."""

    def summarize(self, images: Sequence[ViralImage]) -> Summary:
        if not images:
            return Summary()

        total_engagement = sum(image.engagement_score or 0 for image in images)
        avg_engagement = round(total_engagement / len(images), 2)

        platform_distribution: Dict[str, int] = {}
        author_followers: Dict[str, int] = {}
        author_posts: Dict[str, int] = {}

        for image in images:
            platform = image.platform.value
            platform_distribution[platform] = platform_distribution.get(platform, 0) + 1

            if is_placeholder_author(image.author):
                continue
            author_followers[image.author] = max(author_followers.get(image.author, 0), image.author_followers or 0)
            author_posts[image.author] = author_posts.get(image.author, 0) + 1

        top_authors: List[AuthorStats] = sorted(
            (AuthorStats(author=author, followers=followers, posts_count=author_posts[author])
             for author, followers in author_followers.items()),
            key=lambda stats: stats.followers,
            reverse=True,
        )[:TOP_AUTHORS_LIMIT]

        return Summary(
            total_images=len(images),
            avg_engagement=avg_engagement,
            platform_distribution=platform_distribution,
            top_authors=top_authors,
        )
