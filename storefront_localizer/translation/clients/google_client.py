"""Google Cloud Translation (v2 REST) client."""

from typing import Any, List, Mapping, Optional

import httpx

from ...errors import ProviderError
from ...models import ProviderTranslation
from ..rate_limiter import RateLimiter
from .base import TranslationProvider


class GoogleTranslateClient(TranslationProvider):
    """Client for the Google Translate v2 API."""

    name = "google"
    batch_size = 128  # segments per request accepted by v2
    BASE_URL = "https://translation.googleapis.com/language/translate/v2"

    LANGUAGE_MAP = {
        "zh": "zh-CN",
        "he": "iw",
    }

    def __init__(
        self,
        api_key: str,
        rate_limiter: Optional[RateLimiter] = None,
        requests_per_minute: int = 100,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(rate_limiter, requests_per_minute)
        if not api_key:
            raise ValueError("Google Translate API key is required")
        self.api_key = api_key
        self.client = client or httpx.AsyncClient(timeout=timeout)

    def map_language(self, code: str) -> str:
        return self.LANGUAGE_MAP.get(code.lower(), code.lower())

    async def _translate_texts(
        self,
        texts: List[str],
        from_lang: str,
        to_lang: str,
        context: Mapping[str, Any],
    ) -> List[ProviderTranslation]:
        payload = {
            "q": texts,
            "source": self.map_language(from_lang),
            "target": self.map_language(to_lang),
            "format": "text",
        }

        try:
            response = await self.client.post(self.BASE_URL, params={"key": self.api_key}, json=payload)
        except httpx.HTTPError as e:
            raise ProviderError(f"Google Translate request failed: {e}", self.name, original_error=e) from e

        if not response.is_success:
            raise ProviderError(
                f"Google Translate API error: {response.status_code}",
                self.name,
                response.status_code,
            )

        try:
            translations = response.json()["data"]["translations"]
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderError(f"Unexpected Google Translate response: {e}", self.name, original_error=e) from e

        return [
            ProviderTranslation(
                text=item.get("translatedText", ""),
                confidence=self.estimate_confidence(item.get("translatedText", ""), original),
                provider=self.name,
                detected_source_lang=item.get("detectedSourceLanguage"),
            )
            for item, original in zip(translations, texts)
        ]

    def estimate_confidence(self, translated: str, original: str) -> float:
        if not translated:
            return 0.1
        if original:
            ratio = len(translated) / len(original)
            if ratio < 0.3 or ratio > 3:
                return 0.6  # suspicious length ratio
        return 0.8

    async def aclose(self) -> None:
        await self.client.aclose()
