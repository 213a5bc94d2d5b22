"""Translation pipeline: memory, multi-provider dispatch, scoring and review."""

import asyncio
import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..config import Config
from ..errors import NoProvidersAvailable
from ..models import (
    BatchItemResult,
    ProviderTranslation,
    ReviewItem,
    ReviewStatus,
    TranslationRequest,
    TranslationResult,
    content_type_of,
)
from ..services.analytics import EventListener, EventRecorder, TranslationEvent, emit
from ..services.json_store import AsyncJsonStore
from ..services.review_queue import ReviewQueue
from ..validation.quality_scorer import QualityScorer
from .cache import LRUCache
from .clients import TranslationProvider, build_providers, sort_by_priority
from .memory import TranslationMemory

logger = logging.getLogger(__name__)

# How much each vendor's output is trusted when picking between candidates
PROVIDER_RELIABILITY = {
    "deepl": 0.9,
    "azure": 0.85,
    "google": 0.8,
}


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class TranslationPipeline:
    """
    Translates content through memory, providers, scoring and review.

    Flow per request:
    1. Return a cached result for an identical request
    2. Return a translation memory match with confidence >= 0.95
    3. Ask up to `max_providers` providers concurrently (failures are skipped)
    4. Pick the best candidate (confidence, provider reliability, length)
    5. Score it and queue it for human review below `quality_threshold`
    6. Store it in translation memory and the result cache
    """

    def __init__(
        self,
        providers: Sequence[TranslationProvider],
        memory: Optional[TranslationMemory] = None,
        cache: Optional[LRUCache] = None,
        scorer: Optional[QualityScorer] = None,
        review_queue: Optional[ReviewQueue] = None,
        quality_threshold: float = 0.8,
        memory_hit_threshold: float = 0.95,
        max_providers: int = 2,
        batch_size: int = 10,
        listeners: Optional[Iterable[EventListener]] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            providers: Translation clients; sorted by vendor priority
            memory: Translation memory (a fresh in-memory one if not provided)
            cache: Result cache keyed by request content
            scorer: Quality scorer
            review_queue: Human review queue; approvals are written back to memory,
                rejections are removed from it
            quality_threshold: Gate score below which results need review
            memory_hit_threshold: Minimum memory match confidence to skip providers
            max_providers: How many providers to ask per request
            batch_size: Requests processed concurrently by batch_translate
            listeners: Callables receiving TranslationEvent objects
        """
        self.providers = sort_by_priority(list(providers))
        self.memory = memory if memory is not None else TranslationMemory()
        self.cache = cache if cache is not None else LRUCache(200)
        self.scorer = scorer or QualityScorer()
        self.review_queue = review_queue if review_queue is not None else ReviewQueue()
        if self.review_queue.on_approved is None:
            self.review_queue.on_approved = self._apply_approved_review
        if self.review_queue.on_rejected is None:
            self.review_queue.on_rejected = self._apply_rejected_review
        self.quality_threshold = quality_threshold
        self.memory_hit_threshold = memory_hit_threshold
        self.max_providers = max_providers
        self.batch_size = batch_size
        self.recorder = EventRecorder()
        self.listeners: List[EventListener] = [self.recorder, *(listeners or [])]

    @classmethod
    def from_config(
        cls,
        config: Config,
        data_dir: Optional[Union[str, Path]] = None,
        listeners: Optional[Iterable[EventListener]] = None,
    ) -> "TranslationPipeline":
        """Build a pipeline from configuration, persisting state under `data_dir`."""
        memory_store = review_store = None
        if data_dir is not None:
            memory_store = AsyncJsonStore(Path(data_dir) / "memory.json")
            review_store = AsyncJsonStore(Path(data_dir) / "reviews.json")

        return cls(
            providers=build_providers(config),
            memory=TranslationMemory(config.fuzzy_threshold, store=memory_store),
            cache=LRUCache(config.cache_size),
            scorer=QualityScorer(config.quality_weights),
            review_queue=ReviewQueue(store=review_store),
            quality_threshold=config.quality_threshold,
            memory_hit_threshold=config.memory_hit_threshold,
            max_providers=config.max_providers,
            batch_size=config.batch_size,
            listeners=listeners,
        )

    async def load(self) -> None:
        """Load persisted translation memory and review items."""
        await self.memory.load()
        await self.review_queue.load()

    async def translate_content(
        self,
        text: str,
        from_lang: str,
        to_lang: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> TranslationResult:
        return await self.translate(
            TranslationRequest(text=text, from_lang=from_lang, to_lang=to_lang, context=dict(context or {}))
        )

    async def translate(self, request: TranslationRequest) -> TranslationResult:
        """
        Translate one request.

        Raises:
            ValidationError: request is missing required fields
            NoProvidersAvailable: no provider produced a translation
        """
        request.validate()
        start = time.perf_counter()
        key = self.memory.make_key(request.text, request.from_lang, request.to_lang, request.context)

        try:
            cached = self.cache.get(key)
            if cached is not None:
                result = replace(
                    cached, provider="cache", source="cache", processing_time_ms=_elapsed_ms(start)
                )
                logger.debug("Cache hit (%s -> %s)", request.from_lang, request.to_lang)
                self._emit("cache_hit", request, result.processing_time_ms, result.confidence)
                return result

            match = self.memory.find_match(
                request.text, request.from_lang, request.to_lang, request.context
            )
            if match is not None and match.confidence >= self.memory_hit_threshold:
                result = TranslationResult(
                    translation=match.translation,
                    confidence=match.confidence,
                    provider="memory",
                    source="memory",
                    match_type=match.match_type,
                    processing_time_ms=_elapsed_ms(start),
                )
                logger.debug(
                    "Translation memory %s hit (%s -> %s)",
                    match.match_type, request.from_lang, request.to_lang,
                )
                self._emit("memory_hit", request, result.processing_time_ms, match.confidence)
                return result

            candidates = await self._get_provider_translations(request)
            if not candidates:
                raise NoProvidersAvailable(
                    f"No translation providers available for {request.from_lang} -> {request.to_lang}"
                )

            best = self.select_best_translation(candidates, request.text)
            quality_score = self.scorer.gate_score(best, request.text, request.context)
            assessment = self.scorer.assess_translation_quality(
                best, request.text, request.from_lang, request.to_lang, request.context
            )
            needs_review = quality_score < self.quality_threshold

            review_id = None
            if needs_review:
                item = await self.review_queue.enqueue(
                    request.text,
                    best.text,
                    request.from_lang,
                    request.to_lang,
                    quality_score,
                    request.context,
                )
                review_id = item.id
                self._emit("review_enqueued", request, confidence=quality_score)

            await self.memory.store(
                request.text,
                best.text,
                request.from_lang,
                request.to_lang,
                quality_score,
                request.context,
            )

            result = TranslationResult(
                translation=best.text,
                confidence=best.confidence,
                provider=best.provider,
                source="ai",
                quality_score=quality_score,
                needs_review=needs_review,
                review_id=review_id,
                quality=assessment,
                processing_time_ms=_elapsed_ms(start),
            )
            self.cache.set(key, result)

            logger.info(
                "Translated %s -> %s with %s (score %.2f%s)",
                request.from_lang, request.to_lang, best.provider, quality_score,
                ", needs review" if needs_review else "",
            )
            self._emit(
                "ai_translation", request, result.processing_time_ms, best.confidence,
                provider=best.provider, quality_score=quality_score,
            )
            return result

        except Exception as e:
            logger.error(
                "Translation failed (%s -> %s, content type %s): %s",
                request.from_lang, request.to_lang, request.content_type or "-", e,
            )
            self._emit("translation_error", request, _elapsed_ms(start), error=str(e))
            raise

    async def _get_provider_translations(self, request: TranslationRequest) -> List[ProviderTranslation]:
        """Ask the top providers concurrently; failed providers are left out."""
        providers = self.providers[:self.max_providers]
        outcomes = await asyncio.gather(
            *(
                provider.translate(request.text, request.from_lang, request.to_lang, request.context)
                for provider in providers
            ),
            return_exceptions=True,
        )

        translations = []
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning(
                    "Provider %s failed (%s -> %s, content type %s): %s",
                    provider.name, request.from_lang, request.to_lang,
                    request.content_type or "-", outcome,
                )
                continue
            if not outcome.success:
                logger.warning("Provider %s returned an error: %s", provider.name, outcome.error)
                continue
            translations.append(outcome)

        return translations

    def select_best_translation(
        self, translations: List[ProviderTranslation], original_text: str
    ) -> ProviderTranslation:
        """Highest weighted score wins; ties keep provider priority order."""
        if len(translations) == 1:
            return translations[0]

        def total_score(translation: ProviderTranslation) -> float:
            return (
                translation.confidence * 0.6
                + self.provider_reliability(translation.provider) * 0.3
                + self.length_score(translation.text, original_text) * 0.1
            )

        return max(translations, key=total_score)

    @staticmethod
    def provider_reliability(provider: str) -> float:
        return PROVIDER_RELIABILITY.get(provider, 0.7)

    @staticmethod
    def length_score(translation: str, original: str) -> float:
        if not original:
            return 1.0
        ratio = len(translation) / len(original)
        if 0.5 <= ratio <= 2.0:
            return 1.0
        if 0.3 <= ratio <= 3.0:
            return 0.8
        return 0.5

    async def batch_translate(self, requests: Sequence[TranslationRequest]) -> List[BatchItemResult]:
        """
        Translate many requests.

        Requests run in sub-batches of `batch_size`: sequentially between
        sub-batches, concurrently inside one. A failed item never aborts the
        batch; it comes back with `success=False` and the error message.
        """
        results: List[BatchItemResult] = []

        for i in range(0, len(requests), self.batch_size):
            batch = requests[i:i + self.batch_size]
            outcomes = await asyncio.gather(
                *(self.translate(request) for request in batch), return_exceptions=True
            )

            for request, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    if not isinstance(outcome, Exception):
                        raise outcome
                    results.append(BatchItemResult(id=request.id, success=False, error=str(outcome)))
                else:
                    results.append(BatchItemResult(id=request.id, success=True, result=outcome))

        return results

    def get_review_queue(self, status: Optional[Union[ReviewStatus, str]] = None) -> List[ReviewItem]:
        return self.review_queue.list(status)

    async def resolve_review(
        self,
        item_id: str,
        action: str,
        final_translation: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ReviewItem:
        """Approve or reject a review item; the outcome is reflected in translation memory."""
        item = await self.review_queue.resolve(item_id, action, final_translation, notes)
        emit(
            self.listeners,
            TranslationEvent(
                event_type="review_resolved",
                language=item.to_lang,
                confidence=item.quality_score,
                data={
                    "review_id": item.id,
                    "status": item.status.value,
                    "from_lang": item.from_lang,
                    "original_text": item.original_text,
                    "content_type": content_type_of(item.context),
                },
            ),
        )
        return item

    async def _apply_approved_review(self, item: ReviewItem) -> None:
        await self.memory.store(
            item.original_text,
            item.final_translation,
            item.from_lang,
            item.to_lang,
            1.0,
            item.context,
        )
        # The cached machine result is stale now
        self.cache.delete(
            self.memory.make_key(item.original_text, item.from_lang, item.to_lang, item.context)
        )

    async def _apply_rejected_review(self, item: ReviewItem) -> None:
        key = self.memory.make_key(item.original_text, item.from_lang, item.to_lang, item.context)
        entry = self.memory.get(key)
        # Leave newer translations stored under the same key alone
        if entry is not None and entry.translation == item.translation:
            await self.memory.delete(key)
        self.cache.delete(key)

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "providers": [provider.describe() for provider in self.providers],
            "memory_size": len(self.memory),
            "review_queue_size": len(self.review_queue),
            "pending_reviews": self.review_queue.pending_count,
            "quality_threshold": self.quality_threshold,
            "average_processing_time": self.recorder.average_processing_time,
            "cache": self.cache.get_stats(),
            "events": dict(self.recorder.counts),
        }

    async def aclose(self) -> None:
        """Close provider network clients."""
        for provider in self.providers:
            await provider.aclose()

    def _emit(
        self,
        event_type: str,
        request: TranslationRequest,
        duration_ms: Optional[int] = None,
        confidence: Optional[float] = None,
        **data: Any,
    ) -> None:
        emit(
            self.listeners,
            TranslationEvent(
                event_type=event_type,
                language=request.to_lang,
                duration_ms=duration_ms,
                confidence=confidence,
                data={
                    "from_lang": request.from_lang,
                    "content_type": content_type_of(request.context),
                    **data,
                },
            ),
        )
