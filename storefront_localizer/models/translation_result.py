"""Data models for translation results and quality scoring."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ProviderTranslation:
    """A single answer from a translation provider."""

    text: str
    confidence: float
    provider: str  # "deepl", "google" or "azure"
    detected_source_lang: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Check if the provider returned a translation."""
        return self.error is None

    @classmethod
    def failed(cls, provider: str, error: str) -> "ProviderTranslation":
        """Placeholder for a batch item the provider could not translate."""
        return cls(text="", confidence=0.0, provider=provider, error=error)


@dataclass
class QualityAssessment:
    """Represents the quality assessment of a translation (all scores 0-1)."""

    overall_score: float
    accuracy: float
    fluency: float
    consistency: float
    style: float
    recommendations: List[str] = field(default_factory=list)

    @property
    def needs_human_review(self) -> bool:
        return self.overall_score < 0.7

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": round(self.overall_score, 4),
            "accuracy": round(self.accuracy, 4),
            "fluency": round(self.fluency, 4),
            "consistency": round(self.consistency, 4),
            "style": round(self.style, 4),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class TranslationResult:
    """Represents the outcome of translating a single request."""

    translation: str
    confidence: float
    provider: str  # "deepl", "google", "azure", "memory" or "cache"
    source: str  # "ai", "memory" or "cache"
    processing_time_ms: int
    quality_score: Optional[float] = None
    needs_review: bool = False
    match_type: Optional[str] = None  # "exact" or "fuzzy" for memory hits
    review_id: Optional[str] = None
    quality: Optional[QualityAssessment] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "translation": self.translation,
            "confidence": round(self.confidence, 4),
            "provider": self.provider,
            "source": self.source,
            "quality_score": None if self.quality_score is None else round(self.quality_score, 4),
            "needs_review": self.needs_review,
            "processing_time_ms": self.processing_time_ms,
        }
        if self.match_type:
            data["match_type"] = self.match_type
        if self.review_id:
            data["review_id"] = self.review_id
        if self.quality:
            data["quality"] = self.quality.to_dict()
        return data


@dataclass
class BatchItemResult:
    """Per-item outcome of a batch translation."""

    id: Optional[str]
    success: bool
    result: Optional[TranslationResult] = None
    error: Optional[str] = None
