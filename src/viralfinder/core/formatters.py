#!/usr/bin/env python3
"""
Formatting utilities for search results display.
"""

from typing import List

from .models import SearchRecord, SearchResults, Summary, ViralImage


def format_number(value: int) -> str:
    """Compact count, e.g. 1.2K or 3.4M."""
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return str(value)


def format_image(rank: int, image: ViralImage) -> str:
    """Format a single image for display."""
    lines = [
        f"{rank:>2}. [{image.platform.value.upper()}] {image.title} (score {image.engagement_score})",
        f"    👤 {image.author} ({format_number(image.author_followers)} followers)",
        f"    ❤️ {format_number(image.likes_estimate)}  💬 {format_number(image.comments_estimate)}  "
        f"🔁 {format_number(image.shares_estimate)}  👁 {format_number(image.views_estimate)}",
        f"    {image.post_url}",
    ]
    if image.hashtags:
        lines.append("    " + " ".join(f"#{tag}" for tag in sorted(image.hashtags)))
    return "\n".join(lines)


def format_summary(summary: Summary) -> str:
    lines = [
        "📊 Summary:",
        f"  Images: {summary.total_images}",
        f"  Average engagement: {summary.avg_engagement}",
    ]
    if summary.platform_distribution:
        distribution = ", ".join(f"{platform}: {count}" for platform, count in sorted(summary.platform_distribution.items()))
        lines.append(f"  Platforms: {distribution}")
    if summary.top_authors:
        lines.append("  Top authors:")
        for stats in summary.top_authors:
            lines.append(f"    • {stats.author} ({format_number(stats.followers)} followers, {stats.posts_count} posts)")
    return "\n".join(lines)


def format_search_record(record: SearchRecord) -> str:
    created = record.created_at.strftime("%Y-%m-%d %H:%M") if record.created_at else "-"
    return f"#{record.id:<5} [{created}] {record.status.value:<10} {record.total_results:>3} results  {record.query}"


def format_search_history(records: List[SearchRecord]) -> str:
    if not records:
        return "No searches yet"
    return "\n".join(format_search_record(record) for record in records)


def format_results(results: SearchResults) -> str:
    """Format a full result set for display."""
    lines = [
        f"\n=== Search #{results.search.id}: {results.search.query} ===",
        f"Status: {results.search.status.value}",
        "",
    ]
    if results.images:
        lines.extend(format_image(rank, image) for rank, image in enumerate(results.images, start=1))
    else:
        lines.append("No viral content found")
    lines.extend(["", format_summary(results.summary), "=" * 50])
    return "\n".join(lines)
