"""Data models for the translation pipeline."""

from .translation_request import TranslationRequest, content_type_of
from .translation_result import (
    BatchItemResult,
    ProviderTranslation,
    QualityAssessment,
    TranslationResult,
)
from .review_item import ReviewItem, ReviewStatus, TranslationMemoryEntry

__all__ = [
    "TranslationRequest",
    "content_type_of",
    "BatchItemResult",
    "ProviderTranslation",
    "QualityAssessment",
    "TranslationResult",
    "ReviewItem",
    "ReviewStatus",
    "TranslationMemoryEntry",
]
