"""Translation engines behind a single capability.

The engine is chosen once at startup from TRANSLATION_PROVIDER.
"""

from translator.services.translation.base import (
    TranslationProvider,
    TranslateResult,
    ProviderError,
    ProviderTimeout,
    ProviderNetworkError,
    ProviderHTTPError,
    ProviderBadResponse,
)
from translator.services.translation.libretranslate import LibreTranslateProvider


def get_translation_provider(config) -> TranslationProvider:
    """Build the configured provider. Raises ValueError for unknown engines."""
    provider = config.get('TRANSLATION_PROVIDER') or 'libretranslate'

    if provider == 'libretranslate':
        return LibreTranslateProvider(
            base_url=config.get('LIBRETRANSLATE_URL') or 'http://localhost:5000',
            timeout_ms=config.get('PROVIDER_TIMEOUT_MS') or 10_000,
            api_key=config.get('LIBRETRANSLATE_API_KEY') or '',
        )

    raise ValueError(f"Unsupported TRANSLATION_PROVIDER: {provider}")


__all__ = [
    'TranslationProvider',
    'TranslateResult',
    'ProviderError',
    'ProviderTimeout',
    'ProviderNetworkError',
    'ProviderHTTPError',
    'ProviderBadResponse',
    'LibreTranslateProvider',
    'get_translation_provider',
]
