"""Third-party provider clients."""

from .apify_client import ApifyClient
from .serper_client import SerperClient
from .openrouter_client import OpenRouterClient

__all__ = ['ApifyClient', 'SerperClient', 'OpenRouterClient']
