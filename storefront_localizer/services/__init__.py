"""Supporting services: persistence, review queue and analytics events."""

from .json_store import AsyncJsonStore
from .review_queue import ReviewQueue
from .analytics import EventRecorder, TranslationEvent

__all__ = ["AsyncJsonStore", "ReviewQueue", "EventRecorder", "TranslationEvent"]
