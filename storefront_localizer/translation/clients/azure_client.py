"""Azure AI Translator (v3 REST) client."""

from typing import Any, List, Mapping, Optional

import httpx

from ...errors import ProviderError
from ...models import ProviderTranslation
from ..rate_limiter import RateLimiter
from .base import TranslationProvider


class AzureTranslatorClient(TranslationProvider):
    """Client for the Azure Translator v3 API."""

    name = "azure"
    batch_size = 100  # array elements per request accepted by v3
    BASE_URL = "https://api.cognitive.microsofttranslator.com"

    LANGUAGE_MAP = {
        "zh": "zh-Hans",
        "no": "nb",
        "sr": "sr-Latn",
    }

    def __init__(
        self,
        subscription_key: str,
        region: str,
        rate_limiter: Optional[RateLimiter] = None,
        requests_per_minute: int = 100,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(rate_limiter, requests_per_minute)
        if not subscription_key:
            raise ValueError("Azure Translator subscription key is required")
        self.subscription_key = subscription_key
        self.region = region
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
        params = {
            "api-version": "3.0",
            "from": self.map_language(from_lang),
            "to": self.map_language(to_lang),
        }
        headers = {"Ocp-Apim-Subscription-Key": self.subscription_key}
        if self.region:
            headers["Ocp-Apim-Subscription-Region"] = self.region

        try:
            response = await self.client.post(
                f"{self.BASE_URL}/translate",
                params=params,
                headers=headers,
                json=[{"text": text} for text in texts],
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"Azure Translator request failed: {e}", self.name, original_error=e) from e

        if not response.is_success:
            raise ProviderError(
                f"Azure Translator API error: {response.status_code}",
                self.name,
                response.status_code,
            )

        try:
            items = response.json()
            results = []
            for item in items:
                translation = item["translations"][0]
                detected = item.get("detectedLanguage") or {}
                results.append(
                    ProviderTranslation(
                        text=translation["text"],
                        confidence=translation.get("confidence", 0.8),
                        provider=self.name,
                        detected_source_lang=detected.get("language"),
                    )
                )
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Unexpected Azure Translator response: {e}", self.name, original_error=e) from e

        return results

    async def aclose(self) -> None:
        await self.client.aclose()
