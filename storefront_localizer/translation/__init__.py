"""Translation pipeline components."""

from .cache import LRUCache, TTLCache
from .memory import MemoryMatch, TranslationMemory
from .rate_limiter import RateLimiter
from .translator import TranslationPipeline
from .dynamic_content import DynamicContentTranslator, PassthroughAdapter

__all__ = [
    "LRUCache",
    "TTLCache",
    "MemoryMatch",
    "TranslationMemory",
    "RateLimiter",
    "TranslationPipeline",
    "DynamicContentTranslator",
    "PassthroughAdapter",
]
