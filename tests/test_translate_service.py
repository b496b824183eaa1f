"""
Tests for the translate request flow, outside of Flask.
"""

import pytest

from translator.services.history import StoreError
from translator.services.rate_limit import FixedWindowRateLimiter
from translator.services.translate_service import (
    TranslateService,
    fingerprint,
    get_client_ip,
    text_length,
)
from translator.services.translation import ProviderHTTPError, ProviderTimeout
from translator.services.translation_cache import TranslationCache

from fakes import FakeProvider


class MemoryStore:
    def __init__(self, fail=False):
        self.rows = []
        self.fail = fail

    def insert(self, **fields):
        if self.fail:
            raise StoreError('insert failed')
        self.rows.append(fields)
        return fields


def make_config(**overrides):
    config = {
        'RATE_LIMIT_WINDOW_MS': 60_000,
        'RATE_LIMIT_REQUESTS': 20,
        'RATE_LIMIT_IP_WINDOW_MS': 60_000,
        'RATE_LIMIT_IP_REQUESTS': 60,
        'MAX_TRANSLATION_CHARS': 2000,
        'TEXT_HASH_SALT': 'pepper',
    }
    config.update(overrides)
    return config


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def provider():
    return FakeProvider()


def make_service(provider, store, **config):
    return TranslateService(
        config=make_config(**config),
        user_limiter=FixedWindowRateLimiter(),
        ip_limiter=FixedWindowRateLimiter(),
        cache=TranslationCache(),
        provider=provider,
        store=store,
    )


def body(text='Olá mundo', source='pt', target='en'):
    return lambda: {'text': text, 'sourceLang': source, 'targetLang': target}


class TestFingerprint:

    def test_depends_on_secret(self):
        assert fingerprint('a', 'text') != fingerprint('b', 'text')

    def test_is_sha256_hex(self):
        value = fingerprint('a', 'text')
        assert len(value) == 64
        assert 'text' not in value


class TestTextLength:

    def test_counts_utf16_code_units(self):
        assert text_length('Olá') == 3
        assert text_length('\U0001F600') == 2
        assert text_length('a\U0001F600b') == 4


class TestClientIp:

    def test_forwarded_for_first_hop(self):
        headers = {'X-Forwarded-For': ' 203.0.113.5 , 10.0.0.1', 'X-Real-IP': '10.0.0.2'}
        assert get_client_ip(headers) == '203.0.113.5'

    def test_real_ip_then_cdn_header(self):
        assert get_client_ip({'X-Real-IP': '198.51.100.7'}) == '198.51.100.7'
        assert get_client_ip({'CF-Connecting-IP': '192.0.2.9'}) == '192.0.2.9'

    def test_none_when_unresolved(self):
        assert get_client_ip({}) is None
        assert get_client_ip({'X-Forwarded-For': ' , '}) is None


class TestTranslateService:

    def test_unauthenticated(self, provider, store):
        called = []
        result = make_service(provider, store).handle(None, None, lambda: called.append(1))

        assert result.status == 401
        assert result.headers == {}
        assert called == []
        assert store.rows == []

    def test_rate_limited_before_body_is_read(self, provider, store):
        service = make_service(provider, store, RATE_LIMIT_REQUESTS=1)
        service.handle(1, None, body())

        read = []
        result = service.handle(1, None, lambda: read.append(1))

        assert result.status == 429
        assert result.headers['X-RateLimit-Remaining'] == '0'
        assert 'X-RateLimit-IP-Remaining' not in result.headers
        assert read == []
        assert len(store.rows) == 1

    def test_ip_limit_rejects_even_when_user_allowed(self, provider, store):
        service = make_service(provider, store, RATE_LIMIT_IP_REQUESTS=1)
        assert service.handle(1, '203.0.113.5', body()).status == 200

        result = service.handle(2, '203.0.113.5', body())

        assert result.status == 429
        assert result.headers['X-RateLimit-Remaining'] == '19'
        assert result.headers['X-RateLimit-IP-Remaining'] == '0'

    @pytest.mark.parametrize('payload', [
        None,
        [],
        {},
        {'text': '', 'targetLang': 'en'},
        {'text': 42, 'targetLang': 'en'},
        {'text': 'hi'},
        {'text': 'hi', 'targetLang': 'en', 'sourceLang': 7},
    ])
    def test_invalid_payload(self, provider, store, payload):
        result = make_service(provider, store).handle(1, None, lambda: payload)

        assert result.status == 400
        assert 'X-RateLimit-Remaining' in result.headers
        assert store.rows == []

    def test_text_too_long(self, provider, store):
        result = make_service(provider, store, MAX_TRANSLATION_CHARS=10).handle(1, None, body('x' * 11))

        assert result.status == 413
        assert store.rows == []
        assert provider.calls == []

    def test_text_at_limit_is_accepted(self, provider, store):
        result = make_service(provider, store, MAX_TRANSLATION_CHARS=10).handle(1, None, body('x' * 10))
        assert result.status == 200

    def test_unsupported_languages(self, provider, store):
        service = make_service(provider, store)
        assert service.handle(1, None, body(source='xx')).status == 400
        assert service.handle(1, None, body(target='auto')).status == 400
        assert service.handle(1, None, body(target='xx')).status == 400
        assert store.rows == []

    def test_source_defaults_to_auto(self, provider, store):
        result = make_service(provider, store).handle(1, None, lambda: {'text': 'Olá', 'targetLang': 'en'})

        assert result.status == 200
        assert provider.calls == [('Olá', 'auto', 'en')]
        assert store.rows[0]['source_lang'] == 'auto'
        assert result.body['detectedSourceLang'] is None

    def test_missing_secret(self, provider, store):
        result = make_service(provider, store, TEXT_HASH_SALT='').handle(1, None, body())

        assert result.status == 500
        assert provider.calls == []
        assert store.rows == []

    def test_success_records_metadata_only(self, provider, store):
        result = make_service(provider, store).handle(7, None, body('Olá mundo'))

        assert result.status == 200
        assert result.body == {
            'translatedText': 'Hello',
            'detectedSourceLang': 'pt',
            'meta': {'charsIn': 9, 'latencyMs': 120, 'provider': 'libretranslate', 'cached': False},
        }
        assert store.rows == [{
            'user_id': 7,
            'source_lang': 'pt',
            'target_lang': 'en',
            'chars_in': 9,
            'text_hash': fingerprint('pepper', 'Olá mundo'),
            'detected_source_lang': 'pt',
            'provider': 'libretranslate',
            'latency_ms': 120,
            'status': 'success',
            'error_code': None,
        }]
        assert 'Olá mundo' not in repr(store.rows)

    def test_cache_hit_skips_provider(self, provider, store):
        service = make_service(provider, store)
        service.handle(7, None, body())
        result = service.handle(7, None, body())

        assert result.status == 200
        assert result.body['meta'] == {
            'charsIn': 9, 'latencyMs': 0, 'provider': 'libretranslate', 'cached': True,
        }
        assert len(provider.calls) == 1
        assert store.rows[1]['provider'] == 'cache'
        assert store.rows[1]['latency_ms'] == 0
        assert store.rows[1]['status'] == 'success'

    def test_cache_not_shared_between_users(self, provider, store):
        service = make_service(provider, store)
        service.handle(1, None, body())
        result = service.handle(2, None, body())

        assert result.body['meta']['cached'] is False
        assert len(provider.calls) == 2

    def test_provider_failure(self, store):
        provider = FakeProvider(error=ProviderTimeout())
        result = make_service(provider, store).handle(3, None, body())

        assert result.status == 502
        assert result.body['errorCode'] == 'TIMEOUT'
        assert 'error' in result.body
        assert store.rows[0]['status'] == 'error'
        assert store.rows[0]['error_code'] == 'TIMEOUT'
        assert store.rows[0]['latency_ms'] is None
        assert store.rows[0]['provider'] == 'libretranslate'
        assert store.rows[0]['detected_source_lang'] is None

    def test_provider_failure_is_not_cached(self, store):
        provider = FakeProvider(error=ProviderHTTPError(503))
        service = make_service(provider, store)
        assert service.handle(3, None, body()).body['errorCode'] == 'HTTP_503'

        provider.error = None
        result = service.handle(3, None, body())

        assert result.status == 200
        assert result.body['meta']['cached'] is False

    def test_store_failure_still_returns_translation(self, provider):
        result = make_service(provider, MemoryStore(fail=True)).handle(1, None, body())

        assert result.status == 200
        assert result.body['translatedText'] == 'Hello'

    def test_emoji_count_twice_toward_limit(self, provider, store):
        service = make_service(provider, store, MAX_TRANSLATION_CHARS=3)

        assert service.handle(1, None, body('\U0001F600\U0001F600')).status == 413
        result = service.handle(1, None, body('\U0001F600a'))

        assert result.status == 200
        assert result.body['meta']['charsIn'] == 3
        assert store.rows[0]['chars_in'] == 3
