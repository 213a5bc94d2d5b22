"""Real-time translation of reviews, comments and other dynamic content."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol

from ..config import Config
from ..errors import LocalizerError, ValidationError
from ..services.analytics import TranslationEvent, emit
from .cache import TTLCache, content_key
from .translator import TranslationPipeline

logger = logging.getLogger(__name__)

DEFAULT_TTL_BY_TYPE = {
    "product_review": 86400 * 3,
    "comment": 86400,
    "marketing_message": 3600,
    "default": 86400,
}


class ContentAdapter(Protocol):
    """Adjusts a translation for the target culture and content type."""

    def adapt(
        self, text: str, target_lang: str, content_type: str, context: Mapping[str, Any]
    ) -> str:
        ...


class PassthroughAdapter:
    """Default adapter: returns the translation unchanged."""

    def adapt(
        self, text: str, target_lang: str, content_type: str, context: Mapping[str, Any]
    ) -> str:
        return text


@dataclass
class DynamicTranslation:
    """Outcome of translating one piece of dynamic content."""

    translation: str
    source: str  # "cache", "ai_pipeline", "memory", "original" or "error"
    processing_time_ms: int
    provider: Optional[str] = None
    confidence: Optional[float] = None
    quality_score: Optional[float] = None
    needs_review: bool = False
    error: Optional[str] = None
    id: Optional[str] = None


class DynamicContentTranslator:
    """
    Translates user-generated and marketing content on demand.

    Results are cached for a per-content-type TTL. When the pipeline fails,
    the error propagates unless `fallback_to_original` is set, in which case
    the untranslated content is returned with `source="original"`.
    Resolving a review of dynamic content evicts its cached translation.
    """

    def __init__(
        self,
        pipeline: TranslationPipeline,
        cache: Optional[TTLCache] = None,
        adapter: Optional[ContentAdapter] = None,
        source_language: str = "en",
        ttl_by_type: Optional[Dict[str, int]] = None,
        fallback_to_original: bool = False,
    ):
        self.pipeline = pipeline
        self.cache = cache if cache is not None else TTLCache()
        self.adapter = adapter or PassthroughAdapter()
        self.source_language = source_language
        self.ttl_by_type = {**DEFAULT_TTL_BY_TYPE, **(ttl_by_type or {})}
        self.fallback_to_original = fallback_to_original
        pipeline.listeners.append(self._on_pipeline_event)

    @classmethod
    def from_config(
        cls,
        pipeline: TranslationPipeline,
        config: Config,
        adapter: Optional[ContentAdapter] = None,
    ) -> "DynamicContentTranslator":
        return cls(
            pipeline,
            adapter=adapter,
            source_language=config.default_source_language,
            ttl_by_type=config.dynamic_cache_ttl,
            fallback_to_original=config.fallback_to_original,
        )

    def cache_key(self, content: str, target_lang: str, content_type: str) -> str:
        return f"dynamic_translation:{content_key(content)}:{target_lang}:{content_type}"

    def ttl_for(self, content_type: str) -> int:
        return self.ttl_by_type.get(content_type, self.ttl_by_type["default"])

    async def translate_dynamic_content(
        self,
        content: str,
        target_lang: str,
        content_type: str,
        user_context: Optional[Mapping[str, Any]] = None,
    ) -> DynamicTranslation:
        """
        Translate one piece of dynamic content.

        Raises:
            ValidationError: content, target language or content type missing
            LocalizerError: pipeline failure, unless fallback_to_original is set
        """
        if not content or not target_lang or not content_type:
            raise ValidationError("content, target_lang and content_type are required")

        start = time.perf_counter()
        user_context = dict(user_context or {})
        key = self.cache_key(content, target_lang, content_type)

        cached = self.cache.get(key)
        if cached is not None:
            elapsed = int((time.perf_counter() - start) * 1000)
            self._emit("dynamic_cache_hit", target_lang, content_type, elapsed)
            return DynamicTranslation(translation=cached, source="cache", processing_time_ms=elapsed)

        try:
            result = await self.pipeline.translate_content(
                content,
                self.source_language,
                target_lang,
                {"contentType": content_type, **user_context},
            )
        except Exception as e:
            elapsed = int((time.perf_counter() - start) * 1000)
            logger.error(
                "Dynamic translation failed (%s -> %s, content type %s): %s",
                self.source_language, target_lang, content_type, e,
            )
            self._emit("dynamic_error", target_lang, content_type, elapsed, error=str(e))
            if not self.fallback_to_original:
                raise
            return DynamicTranslation(
                translation=content, source="original", processing_time_ms=elapsed, error=str(e)
            )

        translation = self.adapter.adapt(result.translation, target_lang, content_type, user_context)
        self.cache.set(
            key,
            translation,
            ttl=self.ttl_for(content_type),
            tags=[target_lang, content_type, self.source_language],
        )

        elapsed = int((time.perf_counter() - start) * 1000)
        self._emit(
            "dynamic_translated", target_lang, content_type, elapsed,
            confidence=result.confidence, provider=result.provider,
        )
        return DynamicTranslation(
            translation=translation,
            source="memory" if result.source == "memory" else "ai_pipeline",
            provider=result.provider,
            confidence=result.confidence,
            quality_score=result.quality_score,
            needs_review=result.needs_review,
            processing_time_ms=elapsed,
        )

    async def batch_translate_dynamic_content(
        self, items: List[Mapping[str, Any]], target_lang: str
    ) -> List[DynamicTranslation]:
        """
        Translate items of {id, content, contentType, userContext} one by one.

        A failed item does not stop the batch: it comes back with
        `source="error"`, an empty translation and the error message.
        """
        results = []
        for item in items:
            try:
                result = await self.translate_dynamic_content(
                    item.get("content"),
                    target_lang,
                    item.get("contentType") or item.get("content_type"),
                    item.get("userContext") or item.get("user_context"),
                )
            except LocalizerError as e:
                result = DynamicTranslation(
                    translation="", source="error", processing_time_ms=0, error=str(e)
                )
            result.id = item.get("id")
            results.append(result)
        return results

    def invalidate(self, content: str, target_lang: str, content_type: str) -> bool:
        """Drop one cached translation; returns False when none was cached."""
        return self.cache.delete(self.cache_key(content, target_lang, content_type))

    def _on_pipeline_event(self, event: TranslationEvent) -> None:
        if event.event_type != "review_resolved":
            return
        content = event.data.get("original_text")
        content_type = event.data.get("content_type")
        if not content or not content_type or event.data.get("from_lang") != self.source_language:
            return
        if self.invalidate(content, event.language, content_type):
            logger.debug("Evicted cached dynamic translation after review %s", event.data.get("review_id"))

    def _emit(
        self,
        event_type: str,
        target_lang: str,
        content_type: str,
        duration_ms: int,
        confidence: Optional[float] = None,
        **data: Any,
    ) -> None:
        emit(
            self.pipeline.listeners,
            TranslationEvent(
                event_type=event_type,
                language=target_lang,
                duration_ms=duration_ms,
                confidence=confidence,
                data={"content_type": content_type, **data},
            ),
        )
