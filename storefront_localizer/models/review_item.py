"""Data models for the human review queue and translation memory."""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class ReviewStatus(str, Enum):
    """Review item status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class ReviewItem:
    """A machine translation waiting for (or past) human review."""

    id: str
    original_text: str
    translation: str
    from_lang: str
    to_lang: str
    quality_score: float
    priority: float
    status: ReviewStatus = ReviewStatus.PENDING
    context: Dict[str, Any] = field(default_factory=dict)
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    reviewer_notes: Optional[str] = None
    final_translation: Optional[str] = None  # only set once approved
    reviewed_at: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ReviewStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReviewItem":
        data = dict(data)
        data["status"] = ReviewStatus(data.get("status", "pending"))
        return cls(**data)


@dataclass
class TranslationMemoryEntry:
    """A previously produced translation, reusable by exact or fuzzy match."""

    key: str
    original_text: str
    translation: str
    from_lang: str
    to_lang: str
    confidence: float
    context: Dict[str, Any] = field(default_factory=dict)
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    usage_count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranslationMemoryEntry":
        return cls(**data)
