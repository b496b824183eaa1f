"""Test doubles shared across test modules."""

from translator.services.translation import TranslationProvider, TranslateResult


class FakeProvider(TranslationProvider):
    """Engine double: returns a canned result or raises a canned error."""

    name = 'libretranslate'

    def __init__(self, translated_text='Hello', latency_ms=120, error=None):
        self.translated_text = translated_text
        self.latency_ms = latency_ms
        self.error = error
        self.calls = []

    def translate(self, text, source_lang, target_lang):
        self.calls.append((text, source_lang, target_lang))
        if self.error is not None:
            raise self.error
        return TranslateResult(
            translated_text=self.translated_text,
            detected_source_lang=None if source_lang == 'auto' else source_lang,
            latency_ms=self.latency_ms,
            provider=self.name,
        )
