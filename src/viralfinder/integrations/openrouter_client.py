#!/usr/bin/env python3
"""
OpenRouter integration for content analysis.

OpenRouter exposes an OpenAI-compatible chat completions API, so the official
OpenAI SDK is used with a different base URL and attribution headers.
"""

import logging
from typing import List, Dict, Optional, Any

import openai
from openai import OpenAI

from viralfinder.core.config import DEFAULT_OPENROUTER_BASE_URL, DEFAULT_OPENROUTER_MODEL
from viralfinder.core.exceptions import AnalyzerNotConfiguredError, LLMError

logger = logging.getLogger(__name__)

PROVIDER_NAME = "OpenRouter"


class OpenRouterClient:
    """Thin chat-completions client; returns replies in plain dict form."""

    def __init__(self,
                 api_key: Optional[str],
                 model: str = DEFAULT_OPENROUTER_MODEL,
                 base_url: str = DEFAULT_OPENROUTER_BASE_URL,
                 referer: str = "https://viralv1.com",
                 title: str = "ViralV1 Content Analysis",
                 max_tokens: int = 1000,
                 temperature: float = 0.3,
                 timeout: int = 60):
        """
        Initialize OpenRouter client.

        Args:
            api_key: OpenRouter API key
            model: Model slug to request
            base_url: API base URL
            referer: HTTP-Referer attribution header
            title: X-Title attribution header
            max_tokens: Completion token budget
            temperature: Sampling temperature
            timeout: Request timeout in seconds
        """
        if not api_key:
            raise AnalyzerNotConfiguredError(PROVIDER_NAME)

        self.client = OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            default_headers={
                "HTTP-Referer": referer,
                "X-Title": title,
            },
        )
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @classmethod
    def from_config(cls, config) -> 'OpenRouterClient':
        """Build a client from the application Config."""
        providers = config.providers
        return cls(
            api_key=providers.openrouter_api_key,
            model=providers.openrouter_model,
            base_url=providers.openrouter_base_url,
            referer=providers.openrouter_referer,
            title=providers.openrouter_title,
            max_tokens=config.app.llm_max_tokens,
            temperature=config.app.llm_temperature,
            timeout=config.app.request_timeout,
        )

    def chat_completion(self, messages: List[Dict[str, str]], max_tokens: Optional[int] = None,
                        temperature: Optional[float] = None) -> Dict[str, Any]:
        """
        Send a chat completion request.

        Args:
            messages: Chat messages
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            Response dict with 'choices' and 'usage' keys. Structure is not
            validated here; callers decide what a usable reply is.

        Raises:
            LLMError: On transport failures and non-success statuses
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens or self.max_tokens,
                temperature=self.temperature if temperature is None else temperature,
            )
        except openai.APIStatusError as e:
            logger.error(f"{PROVIDER_NAME} API failed with status {e.status_code}: {e.message}")
            raise LLMError(PROVIDER_NAME, self.model, e) from e
        except openai.APIError as e:
            logger.error(f"{PROVIDER_NAME} request failed: {e}")
            raise LLMError(PROVIDER_NAME, self.model, e) from e

        return self._to_dict(response)

    @staticmethod
    def _to_dict(response: Any) -> Dict[str, Any]:
        choices = []
        for choice in getattr(response, 'choices', None) or []:
            message = getattr(choice, 'message', None)
            choices.append({
                "message": {
                    "content": message.content,
                    "role": message.role,
                } if message is not None else None,
                "finish_reason": getattr(choice, 'finish_reason', None),
            })

        result: Dict[str, Any] = {"choices": choices}

        usage = getattr(response, 'usage', None)
        if usage is not None:
            result["usage"] = {
                "prompt_tokens": usage.prompt_tokens,
                "completion_tokens": usage.completion_tokens,
                "total_tokens": usage.total_tokens,
            }
            logger.debug(
                f"{PROVIDER_NAME} call - tokens: {usage.prompt_tokens} prompt + "
                f"{usage.completion_tokens} completion = {usage.total_tokens} total"
            )

        return result

    def test_connection(self) -> bool:
        """Test OpenRouter API connection."""
        try:
            response = self.chat_completion([{"role": "user", "content": "Hello"}], max_tokens=5)
            if response.get("choices"):
                logger.info(f"{PROVIDER_NAME} API connection test successful")
                return True
            logger.error(f"{PROVIDER_NAME} API connection test failed: no response")
            return False
        except LLMError as e:
            logger.error(f"{PROVIDER_NAME} API connection test failed: {e}")
            return False
