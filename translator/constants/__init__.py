"""Shared constants for the application."""

from translator.constants.languages import (
    SUPPORTED_LANGUAGES,
    LANGUAGE_CODES,
    AUTO_DETECT,
    is_supported_language,
)

__all__ = [
    'SUPPORTED_LANGUAGES',
    'LANGUAGE_CODES',
    'AUTO_DETECT',
    'is_supported_language',
]
