"""Common contract for translation provider clients."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from ...errors import ProviderError
from ...models import ProviderTranslation
from ..rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class TranslationProvider(ABC):
    """
    Base class for vendor translation clients.

    Subclasses implement `_translate_texts`, a single vendor round trip for a
    list of texts. This class adds rate limiting, sub-batching and per-item
    error placeholders for batches.
    """

    name: str = "provider"
    batch_size: int = 50

    def __init__(self, rate_limiter: Optional[RateLimiter] = None, requests_per_minute: int = 100):
        self.rate_limiter = rate_limiter or RateLimiter(requests_per_minute)

    async def translate(
        self,
        text: str,
        from_lang: str,
        to_lang: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> ProviderTranslation:
        """
        Translate a single text.

        Raises:
            ProviderError: on any network or API failure
        """
        await self.rate_limiter.wait_for_token()
        results = await self._translate_texts([text], from_lang, to_lang, context or {})
        if not results:
            raise ProviderError(f"{self.name} returned no translation", self.name)
        return results[0]

    async def batch_translate(
        self,
        texts: List[str],
        from_lang: str,
        to_lang: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> List[ProviderTranslation]:
        """
        Translate many texts, one vendor call per sub-batch.

        Always returns one result per input, in input order. Items of a failed
        sub-batch carry `error` instead of a translation.
        """
        if not texts:
            return []

        results: List[ProviderTranslation] = []
        for i in range(0, len(texts), self.batch_size):
            batch = texts[i:i + self.batch_size]
            await self.rate_limiter.wait_for_token()

            try:
                batch_results = await self._translate_texts(batch, from_lang, to_lang, context or {})
                if len(batch_results) != len(batch):
                    raise ProviderError(
                        f"{self.name} returned {len(batch_results)} translations for {len(batch)} texts",
                        self.name,
                    )
                results.extend(batch_results)
            except ProviderError as e:
                logger.warning(
                    "%s batch translation failed (%s -> %s, %d texts): %s",
                    self.name, from_lang, to_lang, len(batch), e,
                )
                results.extend(ProviderTranslation.failed(self.name, str(e)) for _ in batch)

        return results

    @abstractmethod
    async def _translate_texts(
        self,
        texts: List[str],
        from_lang: str,
        to_lang: str,
        context: Mapping[str, Any],
    ) -> List[ProviderTranslation]:
        """Run one vendor request for `texts`."""

    def estimate_confidence(self, translated: str, original: str) -> float:
        """Heuristic confidence for vendors that do not report one."""
        return 0.8

    async def aclose(self) -> None:
        """Release network resources."""

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "active": True,
            "requests_per_minute": self.rate_limiter.capacity,
        }
