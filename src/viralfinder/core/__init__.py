"""
Core search pipeline: models, discovery, analysis, scoring and storage.
"""
