"""DeepL API client for translation."""

import asyncio
from typing import Any, List, Mapping, Optional

import deepl

from ...errors import ProviderError
from ...models import ProviderTranslation
from ..rate_limiter import RateLimiter
from .base import TranslationProvider


class DeepLClient(TranslationProvider):
    """Client for DeepL translation API."""

    name = "deepl"
    batch_size = 50

    SOURCE_LANGUAGE_MAP = {
        "en": "EN",
        "es": "ES",
        "fr": "FR",
        "de": "DE",
        "it": "IT",
        "pt": "PT",
        "ja": "JA",
        "zh": "ZH",
        "ko": "KO",
    }

    # DeepL requires a regional variant for some target languages
    TARGET_LANGUAGE_MAP = {
        **SOURCE_LANGUAGE_MAP,
        "en": "EN-US",
        "pt": "PT-PT",
    }

    # Languages that support formality
    FORMALITY_SUPPORTED = {"DE", "FR", "IT", "ES", "NL", "PL", "PT-BR", "PT-PT", "JA", "RU"}

    FORMALITY_ALIASES = {
        "formal": "more",
        "informal": "less",
    }

    def __init__(
        self,
        api_key: str,
        rate_limiter: Optional[RateLimiter] = None,
        requests_per_minute: int = 100,
        translator: Optional[Any] = None,
    ):
        """
        Initialize the DeepL client.

        Args:
            api_key: DeepL API key (free keys end in ":fx")
            rate_limiter: Shared limiter; a new one is created if not provided
            requests_per_minute: Budget for the created limiter
            translator: Pre-built `deepl.Translator`, mostly for tests
        """
        super().__init__(rate_limiter, requests_per_minute)
        if not api_key and translator is None:
            raise ValueError("DeepL API key is required")
        self.translator = translator or deepl.Translator(api_key)

    def map_source_language(self, code: str) -> str:
        return self.SOURCE_LANGUAGE_MAP.get(code.lower(), code.upper())

    def map_target_language(self, code: str) -> str:
        return self.TARGET_LANGUAGE_MAP.get(code.lower(), code.upper())

    async def _translate_texts(
        self,
        texts: List[str],
        from_lang: str,
        to_lang: str,
        context: Mapping[str, Any],
    ) -> List[ProviderTranslation]:
        target = self.map_target_language(to_lang)

        kwargs = {
            "text": texts,
            "target_lang": target,
            "source_lang": self.map_source_language(from_lang),
            "preserve_formatting": True,
        }

        # Only set formality for supported languages
        formality = context.get("formality")
        formality = self.FORMALITY_ALIASES.get(formality, formality)
        if formality and formality != "default" and target in self.FORMALITY_SUPPORTED:
            kwargs["formality"] = formality

        try:
            results = await asyncio.to_thread(self.translator.translate_text, **kwargs)
        except deepl.DeepLException as e:
            status = getattr(e, "http_status_code", None) or 0
            raise ProviderError(f"DeepL API error: {e}", self.name, status, original_error=e) from e

        # Handle single result case
        if not isinstance(results, list):
            results = [results]

        return [
            ProviderTranslation(
                text=r.text,
                confidence=self.estimate_confidence(r.text, original),
                provider=self.name,
                detected_source_lang=r.detected_source_lang,
            )
            for r, original in zip(results, texts)
        ]

    def estimate_confidence(self, translated: str, original: str) -> float:
        # DeepL reports no confidence, so estimate it from the output length
        length = len(translated)
        if length == 0:
            return 0.1
        if length < 10:
            return 0.7
        if length < 100:
            return 0.85
        return 0.9
