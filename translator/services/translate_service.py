"""Translate request flow.

auth -> rate limit -> validation -> fingerprint -> cache -> engine -> record

Every request that gets past validation writes exactly one metadata row,
whether it was served from cache, by the engine, or failed at the engine.
Request text is never logged and never stored; only its length and a salted
SHA-256 fingerprint are kept.
"""

import hashlib
import logging
import math
from typing import Callable, NamedTuple, Optional

from translator.constants import AUTO_DETECT, is_supported_language
from translator.services.history import StoreError, TranslationStore
from translator.services.rate_limit import FixedWindowRateLimiter, RateLimitResult
from translator.services.translation import ProviderError, TranslationProvider
from translator.services.translation_cache import (
    CachedTranslation,
    TranslationCache,
    make_cache_key,
)

logger = logging.getLogger(__name__)

CACHE_PROVIDER_LABEL = 'cache'


class TranslateResponse(NamedTuple):
    status: int
    body: dict
    headers: dict


def text_length(text: str) -> int:
    """Length in UTF-16 code units, the unit browsers use for string length.

    Characters outside the BMP (most emoji) count as two.
    """
    return len(text.encode('utf-16-le')) // 2


def fingerprint(secret: str, text: str) -> str:
    """One-way hash of secret + text. Never computed over text alone."""
    return hashlib.sha256((secret + text).encode('utf-8')).hexdigest()


def get_client_ip(headers) -> Optional[str]:
    """Best-effort client address from proxy headers, in priority order."""
    forwarded = headers.get('X-Forwarded-For')
    if forwarded:
        first = forwarded.split(',')[0].strip()
        if first:
            return first
    real_ip = (headers.get('X-Real-IP') or '').strip()
    if real_ip:
        return real_ip
    cf_ip = (headers.get('CF-Connecting-IP') or '').strip()
    if cf_ip:
        return cf_ip
    return None


def rate_limit_headers(user_result: RateLimitResult, ip_result: Optional[RateLimitResult]) -> dict:
    headers = {
        'X-RateLimit-Remaining': str(user_result.remaining),
        'X-RateLimit-Reset': str(math.ceil(user_result.reset_at / 1000)),
    }
    if ip_result is not None:
        headers['X-RateLimit-IP-Remaining'] = str(ip_result.remaining)
        headers['X-RateLimit-IP-Reset'] = str(math.ceil(ip_result.reset_at / 1000))
    return headers


class TranslateService:
    """Orchestrates one translate request over injected stores and engine."""

    def __init__(
        self,
        config,
        user_limiter: FixedWindowRateLimiter,
        ip_limiter: FixedWindowRateLimiter,
        cache: TranslationCache,
        provider: TranslationProvider,
        store: TranslationStore,
    ):
        self.config = config
        self.user_limiter = user_limiter
        self.ip_limiter = ip_limiter
        self.cache = cache
        self.provider = provider
        self.store = store

    def handle(self, user_id, client_ip: Optional[str], read_payload: Callable[[], object]) -> TranslateResponse:
        """Run the whole flow.

        read_payload is only called once both rate limits pass, so throttled
        requests never pay for body parsing.
        """
        if user_id is None:
            return TranslateResponse(401, {'error': 'Unauthorized'}, {})

        config = self.config
        user_rl = self.user_limiter.check(
            f'translate:{user_id}',
            window_ms=config['RATE_LIMIT_WINDOW_MS'],
            max_requests=config['RATE_LIMIT_REQUESTS'],
        )
        ip_rl = None
        if client_ip:
            ip_rl = self.ip_limiter.check(
                f'translate-ip:{client_ip}',
                window_ms=config['RATE_LIMIT_IP_WINDOW_MS'],
                max_requests=config['RATE_LIMIT_IP_REQUESTS'],
            )
        headers = rate_limit_headers(user_rl, ip_rl)

        if not user_rl.allowed or (ip_rl is not None and not ip_rl.allowed):
            return TranslateResponse(429, {'error': 'Too many requests. Try again shortly.'}, headers)

        # Validation
        payload = read_payload()
        if not isinstance(payload, dict):
            return TranslateResponse(400, {'error': 'Invalid request'}, headers)

        text = payload.get('text')
        source_lang = payload.get('sourceLang')
        if source_lang is None:
            source_lang = AUTO_DETECT
        target_lang = payload.get('targetLang')
        if not isinstance(text, str) or not text:
            return TranslateResponse(400, {'error': 'Invalid request'}, headers)
        if not isinstance(source_lang, str) or not isinstance(target_lang, str):
            return TranslateResponse(400, {'error': 'Invalid request'}, headers)

        max_chars = config['MAX_TRANSLATION_CHARS']
        if text_length(text) > max_chars:
            return TranslateResponse(413, {'error': f'Current limit: {max_chars} characters.'}, headers)

        if source_lang != AUTO_DETECT and not is_supported_language(source_lang):
            return TranslateResponse(400, {'error': 'Invalid source language.'}, headers)

        if not is_supported_language(target_lang):
            return TranslateResponse(400, {'error': 'Invalid target language.'}, headers)

        secret = config.get('TEXT_HASH_SALT')
        if not secret:
            logger.error("TEXT_HASH_SALT is not configured; refusing translate requests")
            return TranslateResponse(500, {'error': 'Server not configured'}, headers)

        chars_in = text_length(text)
        text_hash = fingerprint(secret, text)
        cache_key = make_cache_key(user_id, source_lang, target_lang, text_hash)

        record = {
            'user_id': user_id,
            'source_lang': source_lang,
            'target_lang': target_lang,
            'chars_in': chars_in,
            'text_hash': text_hash,
        }

        cached = self.cache.get(cache_key)
        if cached is not None:
            self._record(
                record,
                detected_source_lang=cached.detected_source_lang,
                provider=CACHE_PROVIDER_LABEL,
                latency_ms=0,
                status='success',
                error_code=None,
            )
            body = {
                'translatedText': cached.translated_text,
                'detectedSourceLang': cached.detected_source_lang,
                'meta': {
                    'charsIn': chars_in,
                    'latencyMs': 0,
                    'provider': cached.provider,
                    'cached': True,
                },
            }
            return TranslateResponse(200, body, headers)

        try:
            result = self.provider.translate(text, source_lang, target_lang)
        except ProviderError as e:
            logger.warning(f"Translation failed for user {user_id}: {e.code}")
            self._record(
                record,
                detected_source_lang=None,
                provider=self.provider.name,
                latency_ms=None,
                status='error',
                error_code=e.code,
            )
            body = {
                'error': 'Translation failed. Check that the provider is online.',
                'errorCode': e.code,
            }
            return TranslateResponse(502, body, headers)

        self.cache.set(cache_key, CachedTranslation(
            translated_text=result.translated_text,
            provider=result.provider,
            detected_source_lang=result.detected_source_lang,
        ))
        self._record(
            record,
            detected_source_lang=result.detected_source_lang,
            provider=result.provider,
            latency_ms=result.latency_ms,
            status='success',
            error_code=None,
        )
        body = {
            'translatedText': result.translated_text,
            'detectedSourceLang': result.detected_source_lang,
            'meta': {
                'charsIn': chars_in,
                'latencyMs': result.latency_ms,
                'provider': result.provider,
                'cached': False,
            },
        }
        return TranslateResponse(200, body, headers)

    def _record(self, base: dict, **fields):
        # The answer is returned even when the metadata write fails
        try:
            self.store.insert(**base, **fields)
        except StoreError:
            logger.exception(
                f"Failed to record translation metadata "
                f"(user {base['user_id']}, status {fields.get('status')})"
            )
