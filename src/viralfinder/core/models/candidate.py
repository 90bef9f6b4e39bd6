#!/usr/bin/env python3
"""
Discovered-post models.

A Candidate is transient: sources produce it, the pipeline consumes it
immediately, and it is never persisted.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass, field

from .search import Platform


@dataclass(frozen=True)
class RawPayload:
    """Provider payload tagged with the platform whose field layout it follows."""
    platform: Platform
    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


@dataclass
class Candidate:
    """A discovered, not-yet-scored post."""
    id: str
    post_url: str
    image_url: str = ""
    title: str = ""
    description: str = ""
    raw: Optional[RawPayload] = None

    def __post_init__(self):
        self.id = str(self.id)
        self.title = (self.title or "").strip()
        self.description = (self.description or "").strip()
        self.image_url = self.image_url or ""
        self.post_url = self.post_url or ""

    def __repr__(self):
        return f"Candidate(id='{self.id}', post_url='{self.post_url}')"
