"""
Viral content finder: discovers, scores and ranks viral social media posts.
"""

__version__ = "1.0.0"
