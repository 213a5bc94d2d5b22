"""Validation modules for translation quality."""

from .quality_scorer import QualityScorer

__all__ = ["QualityScorer"]
