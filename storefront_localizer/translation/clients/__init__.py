"""Translation API clients."""

from typing import List

from ...config import Config
from ..rate_limiter import RateLimiter
from .base import TranslationProvider
from .deepl_client import DeepLClient
from .google_client import GoogleTranslateClient
from .azure_client import AzureTranslatorClient

# Higher first when choosing which providers to ask
PROVIDER_PRIORITY = {"deepl": 3, "azure": 2, "google": 1}


def build_providers(config: Config) -> List[TranslationProvider]:
    """Create a client for every provider with credentials, best first."""
    providers: List[TranslationProvider] = []

    if config.deepl_api_key:
        providers.append(
            DeepLClient(config.deepl_api_key, RateLimiter(config.requests_per_minute))
        )
    if config.google_api_key:
        providers.append(
            GoogleTranslateClient(
                config.google_api_key,
                RateLimiter(config.requests_per_minute),
                timeout=config.request_timeout,
            )
        )
    if config.azure_subscription_key:
        providers.append(
            AzureTranslatorClient(
                config.azure_subscription_key,
                config.azure_region,
                RateLimiter(config.requests_per_minute),
                timeout=config.request_timeout,
            )
        )

    return sort_by_priority(providers)


def sort_by_priority(providers: List[TranslationProvider]) -> List[TranslationProvider]:
    return sorted(providers, key=lambda p: PROVIDER_PRIORITY.get(p.name, 0), reverse=True)


__all__ = [
    "TranslationProvider",
    "DeepLClient",
    "GoogleTranslateClient",
    "AzureTranslatorClient",
    "PROVIDER_PRIORITY",
    "build_providers",
    "sort_by_priority",
]
