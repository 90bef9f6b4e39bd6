#!/usr/bin/env python3
"""
Content analyzer for discovered posts.

Asks the inference provider to estimate engagement for one candidate and
turns the reply into an AIAnalysis. Any failure along the way (missing
credentials, transport errors, malformed replies) degrades to a randomized
fallback analysis so that a candidate is never lost to the analysis step.
"""

import random
import logging
from typing import Dict, Any, Optional, Protocol, List

from ..exceptions import AnalysisError, AnalyzerNotConfiguredError, LLMResponseError
from ..models import Candidate, Platform, AIAnalysis, DEFAULT_TITLE, UNKNOWN_AUTHOR
from .prompts import ViralAnalysisPrompts
from .json_extraction import extract_json_object

logger = logging.getLogger(__name__)

FALLBACK_DESCRIPTION = "Engaging social media content"
FALLBACK_VIRAL_FACTORS = ['content analysis unavailable']


class ChatCompletionClient(Protocol):
    def chat_completion(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        ...


class ContentAnalyzer:
    """Produces an AIAnalysis for every candidate, real or fallback."""

    def __init__(self, llm_client: Optional[ChatCompletionClient] = None,
                 rng: Optional[random.Random] = None) -> None:
        """
        Initialize analyzer.

        Args:
            llm_client: Chat completion client; None means analysis is unconfigured
            rng: Random source for fallback estimates (seed it in tests)
        """
        self.llm_client = llm_client
        self.rng = rng or random.Random()

    @property
    def is_configured(self) -> bool:
        return self.llm_client is not None

    def analyze(self, candidate: Candidate, platform: Platform) -> AIAnalysis:
        """
        Analyze a candidate for viral potential.

        Args:
            candidate: Discovered post
            platform: Platform the post was discovered on

        Returns:
            AIAnalysis; is_fallback is True when the provider was not used
        """
        try:
            data = self._request_analysis(candidate, platform)
            analysis = AIAnalysis.from_dict(data)
            logger.debug(f"Analysis for post {candidate.id}: engagement {analysis.engagement_score}")
            return analysis
        except AnalyzerNotConfiguredError:
            logger.info(f"Analysis provider not configured, using fallback analysis for post {candidate.id}")
        except AnalysisError as e:
            logger.warning(f"Analysis failed for post {candidate.id}, using fallback: {e}")
        except Exception as e:  # noqa: BLE001
            logger.error(f"Unexpected analysis error for post {candidate.id}, using fallback: {e}", exc_info=True)

        return self.fallback_analysis(candidate)

    def _request_analysis(self, candidate: Candidate, platform: Platform) -> Dict[str, Any]:
        if self.llm_client is None:
            raise AnalyzerNotConfiguredError("OpenRouter")

        messages = ViralAnalysisPrompts.get_messages(candidate, platform)
        response = self.llm_client.chat_completion(messages)

        content = self._reply_content(response)
        logger.debug(f"Analysis content received for post {candidate.id}, length: {len(content)}")
        return extract_json_object(content)

    @staticmethod
    def _reply_content(response: Any) -> str:
        """Validate reply structure step by step and return the message text."""
        if not response:
            raise LLMResponseError("No data returned from analysis provider")
        if not isinstance(response, dict) or 'choices' not in response:
            raise LLMResponseError("missing choices field", str(response))

        choices = response.get('choices') or []
        if not choices or not choices[0]:
            raise LLMResponseError("empty choices array", str(response))

        message = choices[0].get('message')
        if not message:
            raise LLMResponseError("missing message field", str(choices[0]))

        content = message.get('content')
        if not content:
            raise LLMResponseError("No analysis content returned", str(message))
        return content

    def fallback_analysis(self, candidate: Candidate) -> AIAnalysis:
        """Randomized plausible estimates used when real analysis is unavailable."""
        rng = self.rng
        return AIAnalysis(
            estimated_likes=rng.randrange(100, 1100),
            estimated_comments=rng.randrange(10, 110),
            estimated_shares=rng.randrange(5, 55),
            estimated_views=rng.randrange(1000, 6000),
            estimated_followers=rng.randrange(1000, 11000),
            engagement_score=rng.randrange(30, 70),
            content_quality=rng.randrange(40, 70),
            hashtags=[],
            viral_factors=list(FALLBACK_VIRAL_FACTORS),
            suggested_title=candidate.title or DEFAULT_TITLE,
            description=candidate.description or FALLBACK_DESCRIPTION,
            author=UNKNOWN_AUTHOR,
            is_fallback=True,
        )
