"""Exceptions raised by the translation pipeline."""

from typing import Optional


class LocalizerError(Exception):
    """Base class for all localizer errors."""


class ProviderError(LocalizerError):
    """A translation vendor call failed."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int = 0,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.original_error = original_error


class NoProvidersAvailable(LocalizerError):
    """No provider produced a translation."""


class NotFoundError(LocalizerError):
    """Unknown review item."""


class InvalidStateError(LocalizerError):
    """Review item is not in a state that allows the requested transition."""


class ValidationError(LocalizerError):
    """A request is missing required fields or carries invalid values."""
