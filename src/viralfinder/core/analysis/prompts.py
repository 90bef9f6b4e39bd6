#!/usr/bin/env python3
"""
Prompt templates for viral-potential analysis.

Centralizes the text sent to the inference provider so the analyzer only
deals with transport and parsing.
"""

from typing import List, Dict

from ..models import Candidate, Platform


class ViralAnalysisPrompts:
    """Prompts for estimating engagement of a single discovered post."""

    # Field names the analyzer reads back; order matches the prompt bullets.
    RESPONSE_FIELDS = (
        ("estimated_likes", "number (realistic estimate based on content quality)"),
        ("estimated_comments", "number"),
        ("estimated_shares", "number"),
        ("estimated_views", "number"),
        ("estimated_followers", "number (for the author)"),
        ("engagement_score", "number (0-100, how viral this content is)"),
        ("viral_factors", "array of strings (what makes this content viral)"),
        ("suggested_title", "string (if title needs improvement)"),
        ("description", "string (enhanced description)"),
        ("author", "string (extracted or estimated author name)"),
        ("hashtags", "array of relevant hashtags"),
        ("content_quality", "number (0-100)"),
    )

    ANALYSIS_TEMPLATE = """Analyze this {platform} post for viral potential:

Title: {title}
Description: {description}
Post URL: {post_url}

Please provide a JSON response with:
{fields}

Focus on realistic metrics based on actual social media engagement patterns."""

    @classmethod
    def get_analysis_prompt(cls, candidate: Candidate, platform: Platform) -> str:
        fields = "\n".join(f"- {name}: {hint}" for name, hint in cls.RESPONSE_FIELDS)
        return cls.ANALYSIS_TEMPLATE.format(
            platform=platform.value,
            title=candidate.title,
            description=candidate.description,
            post_url=candidate.post_url,
            fields=fields,
        )

    @classmethod
    def get_messages(cls, candidate: Candidate, platform: Platform) -> List[Dict[str, str]]:
        """Chat messages for a single-turn analysis request."""
        return [{"role": "user", "content": cls.get_analysis_prompt(candidate, platform)}]
