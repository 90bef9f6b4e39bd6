#!/usr/bin/env python3
"""
Standardized exception hierarchy for the viral content finder.

Provides specific exception types for different error conditions with
proper error context and recovery suggestions.
"""

from typing import Optional, Dict, Any, List


class ViralFinderError(Exception):
    """Base exception for all viral finder errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Discovery-related exceptions
class DiscoveryError(ViralFinderError):
    """Base exception for content discovery errors."""
    pass


class DiscoveryConnectionError(DiscoveryError):
    """Failed to reach a discovery provider."""

    def __init__(self, provider: str, url: str, original_error: Exception):
        message = f"Failed to connect to {provider} at {url}"
        context = {
            'provider': provider,
            'url': url,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class DiscoveryResponseError(DiscoveryError):
    """Discovery provider answered with a non-success status or unusable body."""

    def __init__(self, provider: str, status_code: Optional[int], body: str = ""):
        message = f"{provider} request failed"
        if status_code is not None:
            message += f": {status_code}"
        context = {
            'provider': provider,
            'status_code': status_code,
            'body': body[:500]
        }
        super().__init__(message, context=context)


# Analysis-related exceptions
class AnalysisError(ViralFinderError):
    """Base exception for AI analysis errors."""
    pass


class AnalyzerNotConfiguredError(AnalysisError):
    """Inference credentials are absent."""

    def __init__(self, provider: str):
        message = f"{provider} API key not configured"
        super().__init__(message, context={'provider': provider})


class LLMError(AnalysisError):
    """Transport or status failure talking to the inference provider."""

    def __init__(self, provider: str, model: str, original_error: Exception):
        message = f"LLM error from {provider} ({model})"
        context = {
            'provider': provider,
            'model': model,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class LLMResponseError(AnalysisError):
    """Inference reply was missing fields or did not contain usable JSON."""

    def __init__(self, reason: str, snippet: str = ""):
        message = f"Invalid analysis response: {reason}"
        context = {
            'reason': reason,
            'snippet': snippet[:500]
        }
        super().__init__(message, context=context)


# Record store exceptions
class RecordStoreError(ViralFinderError):
    """Base exception for record store errors."""
    pass


class RecordStoreConnectionError(RecordStoreError):
    """Failed to connect to the record store."""

    def __init__(self, connection_type: str, original_error: Exception):
        message = f"Failed to connect to record store via {connection_type}"
        context = {
            'connection_type': connection_type,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class RecordStoreOperationError(RecordStoreError):
    """Record store operation failed."""

    def __init__(self, operation: str, table: str, original_error: Exception):
        message = f"Record store {operation} failed on table {table}"
        context = {
            'operation': operation,
            'table': table,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Configuration-related exceptions
class ConfigurationError(ViralFinderError):
    """Configuration is invalid or missing."""

    def __init__(self, config_key: str, issue: str):
        message = f"Configuration error for {config_key}: {issue}"
        context = {
            'config_key': config_key,
            'issue': issue
        }
        super().__init__(message, context=context)


# Validation-related exceptions
class ValidationError(ViralFinderError):
    """Search request validation failed."""

    def __init__(self, field: str, value: Any, expected: str):
        message = f"Validation failed for {field}: expected {expected}, got {value!r}"
        context = {
            'field': field,
            'value': str(value),
            'expected': expected
        }
        super().__init__(message, context=context)


# Search lifecycle exceptions
class SearchCancelledError(ViralFinderError):
    """The search was cancelled before all platforms were processed."""

    def __init__(self, search_id: Optional[int] = None):
        super().__init__("Search cancelled", context={'search_id': search_id})


class SearchFailedError(ViralFinderError):
    """A structural failure aborted the whole search."""

    status_code = 500

    SUGGESTIONS: List[str] = [
        "Try a different search query",
        "Check if the platforms are available",
        "Verify API keys are configured correctly",
    ]

    def __init__(self, original_error: Exception, search_id: Optional[int] = None):
        message = "Failed to find viral content"
        context = {
            'search_id': search_id,
            'original_error': str(original_error),
            'original_type': type(original_error).__name__
        }
        super().__init__(message, context=context)
        self.search_id = search_id
        self.original_error = original_error

    def to_payload(self) -> Dict[str, Any]:
        """Structured error body handed to the presentation layer."""
        return {
            'error': self.message,
            'details': str(self.original_error) or type(self.original_error).__name__,
            'search_id': self.search_id,
            'suggestions': list(self.SUGGESTIONS)
        }
