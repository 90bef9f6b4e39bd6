#!/usr/bin/env python3
"""
Per-candidate pipeline outcome.

Every candidate yields exactly one outcome: an image or a skip reason.
The orchestrator partitions outcomes before anything is persisted.
"""

from enum import Enum
from typing import Optional
from dataclasses import dataclass

from .search import Platform
from .image import ViralImage


class SkipReason(str, Enum):
    """Why a candidate did not make it into the result set."""
    PROCESSING_ERROR = "processing_error"
    LOW_ENGAGEMENT = "low_engagement"
    PERSISTENCE_ERROR = "persistence_error"


@dataclass(frozen=True)
class CandidateOutcome:
    candidate_id: str
    platform: Platform
    image: Optional[ViralImage] = None
    skip_reason: Optional[SkipReason] = None
    detail: str = ""

    def __post_init__(self):
        if (self.image is None) == (self.skip_reason is None):
            raise ValueError("CandidateOutcome needs exactly one of image or skip_reason")

    @property
    def is_scored(self) -> bool:
        return self.image is not None

    @classmethod
    def scored(cls, candidate_id: str, platform: Platform, image: ViralImage) -> 'CandidateOutcome':
        return cls(candidate_id=candidate_id, platform=platform, image=image)

    @classmethod
    def skipped(cls, candidate_id: str, platform: Platform, reason: SkipReason,
                detail: str = "") -> 'CandidateOutcome':
        return cls(candidate_id=candidate_id, platform=platform, skip_reason=reason, detail=detail)
