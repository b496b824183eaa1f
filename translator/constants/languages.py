"""Language constants: single source of truth for the backend.

The UI fetches this list from GET /api/languages.
"""

# Source language value meaning "let the engine detect it"
AUTO_DETECT = 'auto'

# (code, label) in display order
SUPPORTED_LANGUAGES = [
    ('pt', 'Português'),
    ('en', 'English'),
    ('es', 'Español'),
    ('fr', 'Français'),
    ('de', 'Deutsch'),
    ('it', 'Italiano'),
    ('ja', '日本語'),
    ('zh', '中文'),
    ('ru', 'Русский'),
    ('ar', 'العربية'),
]

LANGUAGE_CODES = frozenset(code for code, _ in SUPPORTED_LANGUAGES)


def is_supported_language(code):
    """Return True if code is a supported target/source language code."""
    return isinstance(code, str) and code in LANGUAGE_CODES
