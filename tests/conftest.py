"""Shared fixtures for the storefront localizer tests."""

import logging
from typing import Any, Dict, List, Mapping, Optional

import pytest

from storefront_localizer.errors import ProviderError
from storefront_localizer.models import ProviderTranslation
from storefront_localizer.translation.clients.base import TranslationProvider
from storefront_localizer.translation.rate_limiter import RateLimiter


class FakeProvider(TranslationProvider):
    """In-memory provider returning canned translations."""

    def __init__(
        self,
        name: str = "deepl",
        translations: Optional[Dict[str, str]] = None,
        confidence: float = 0.9,
        fail: bool = False,
    ):
        super().__init__(RateLimiter(1000))
        self.name = name
        self.translations = translations or {}
        self.confidence = confidence
        self.fail = fail
        self.calls: List[List[str]] = []
        self.closed = False

    async def _translate_texts(
        self,
        texts: List[str],
        from_lang: str,
        to_lang: str,
        context: Mapping[str, Any],
    ) -> List[ProviderTranslation]:
        self.calls.append(list(texts))
        if self.fail:
            raise ProviderError(f"{self.name} is down", self.name, 503)
        return [
            ProviderTranslation(
                text=self.translations.get(text, f"[{to_lang}] {text}"),
                confidence=self.confidence,
                provider=self.name,
            )
            for text in texts
        ]

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_provider_factory():
    return FakeProvider


@pytest.fixture
def hola_provider():
    """DeepL stand-in that knows one greeting."""
    return FakeProvider("deepl", {"Hello, world!": "Hola, mundo!"}, confidence=0.9)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo root-logger changes (e.g. the CLI's basicConfig) between tests."""
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    root.setLevel(level)
    root.handlers[:] = handlers
