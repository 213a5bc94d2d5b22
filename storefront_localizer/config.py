"""Configuration management for the storefront localizer."""

import os
from dataclasses import dataclass, field
from typing import Dict, List
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Application configuration."""

    # Provider credentials
    deepl_api_key: str = field(default_factory=lambda: os.getenv("DEEPL_API_KEY", ""))
    google_api_key: str = field(
        default_factory=lambda: os.getenv("GOOGLE_TRANSLATE_API_KEY", "")
    )
    azure_subscription_key: str = field(
        default_factory=lambda: os.getenv("AZURE_TRANSLATOR_KEY", "")
    )
    azure_region: str = field(default_factory=lambda: os.getenv("AZURE_TRANSLATOR_REGION", ""))

    # Pipeline settings (scores are 0-1)
    quality_threshold: float = field(
        default_factory=lambda: float(os.getenv("QUALITY_THRESHOLD", "0.8"))
    )
    fuzzy_threshold: float = field(
        default_factory=lambda: float(os.getenv("FUZZY_THRESHOLD", "0.8"))
    )
    memory_hit_threshold: float = 0.95
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_PER_MINUTE", "100"))
    )
    max_providers: int = field(default_factory=lambda: int(os.getenv("MAX_PROVIDERS", "2")))
    cache_size: int = field(
        default_factory=lambda: int(os.getenv("TRANSLATION_CACHE_SIZE", "200"))
    )
    batch_size: int = 10
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("PROVIDER_TIMEOUT", "30"))
    )

    # Dynamic content settings
    fallback_to_original: bool = field(
        default_factory=lambda: _env_bool("FALLBACK_TO_ORIGINAL")
    )
    default_source_language: str = field(
        default_factory=lambda: os.getenv("DEFAULT_SOURCE_LANGUAGE", "en")
    )
    dynamic_cache_ttl: Dict[str, int] = field(default_factory=lambda: {
        "product_review": 86400 * 3,
        "comment": 86400,
        "marketing_message": 3600,
        "default": 86400,
    })

    # Quality scoring weights
    quality_weights: Dict[str, float] = field(default_factory=lambda: {
        "accuracy": 0.4,
        "fluency": 0.3,
        "consistency": 0.2,
        "style": 0.1,
    })

    # Storage and logging
    data_dir: str = field(default_factory=lambda: os.getenv("LOCALIZER_DATA_DIR", ".localizer"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    @property
    def configured_providers(self) -> List[str]:
        """Names of the providers that have credentials."""
        providers = []
        if self.deepl_api_key:
            providers.append("deepl")
        if self.azure_subscription_key:
            providers.append("azure")
        if self.google_api_key:
            providers.append("google")
        return providers

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.configured_providers:
            errors.append(
                "No translation provider configured "
                "(set DEEPL_API_KEY, GOOGLE_TRANSLATE_API_KEY or AZURE_TRANSLATOR_KEY)"
            )
        if self.azure_subscription_key and not self.azure_region:
            errors.append("AZURE_TRANSLATOR_REGION is required with AZURE_TRANSLATOR_KEY")
        for name in ("quality_threshold", "fuzzy_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                errors.append(f"{name.upper()} must be between 0 and 1 (got {value})")
        if self.requests_per_minute <= 0:
            errors.append("RATE_LIMIT_PER_MINUTE must be positive")
        return errors


# Global config instance
config = Config()
