"""
AI analysis of discovered posts.
"""

from .content_analyzer import ContentAnalyzer
from .json_extraction import extract_json_object
from .prompts import ViralAnalysisPrompts

__all__ = ['ContentAnalyzer', 'extract_json_object', 'ViralAnalysisPrompts']
