#!/usr/bin/env python3
"""
JSON extraction from free-form LLM replies.

Models often wrap the requested object in prose or code fences; the span from
the first '{' to the last '}' is taken as the payload.
"""

import re
import json
import logging
from typing import Dict, Any

from ..exceptions import LLMResponseError

logger = logging.getLogger(__name__)

JSON_OBJECT_PATTERN = re.compile(r'\{[\s\S]*\}')

SNIPPET_LENGTH = 500


def extract_json_object(content: str) -> Dict[str, Any]:
    """
    Pull the embedded JSON object out of a reply.

    Args:
        content: Raw reply text

    Returns:
        Parsed JSON object

    Raises:
        LLMResponseError: No object found, malformed JSON, or non-object JSON
    """
    match = JSON_OBJECT_PATTERN.search(content or "")
    if not match:
        raise LLMResponseError("No JSON found in analysis response", (content or "")[:SNIPPET_LENGTH])

    json_str = match.group(0)
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.debug(f"Unparseable JSON span ({len(json_str)} chars): {json_str[:SNIPPET_LENGTH]!r}")
        raise LLMResponseError(f"Failed to parse analysis JSON: {e.msg}", json_str[:SNIPPET_LENGTH]) from e

    if not isinstance(data, dict):
        raise LLMResponseError("Analysis JSON is not an object", json_str[:SNIPPET_LENGTH])

    return data
