"""LibreTranslate engine adapter."""

import json
import logging
import threading
import time

import requests

from translator.constants import AUTO_DETECT
from translator.services.translation.base import (
    TranslationProvider,
    TranslateResult,
    ProviderTimeout,
    ProviderNetworkError,
    ProviderHTTPError,
    ProviderBadResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10_000
BODY_CHUNK_SIZE = 512


class _Call:
    """One in-flight POST, run on a worker thread so the caller can give up on it."""

    def __init__(self, session, url, payload, timeout_s):
        self.session = session
        self.url = url
        self.payload = payload
        self.timeout_s = timeout_s
        self.abandoned = threading.Event()
        self.status_code = None
        self.ok = False
        self.body = None
        self.error = None

    def run(self):
        try:
            response = self.session.post(self.url, json=self.payload, timeout=self.timeout_s, stream=True)
            try:
                body = bytearray()
                for chunk in response.iter_content(chunk_size=BODY_CHUNK_SIZE):
                    if self.abandoned.is_set():
                        return
                    body.extend(chunk)
                self.status_code = response.status_code
                self.ok = response.ok
                self.body = bytes(body)
            finally:
                response.close()
        except requests.RequestException as e:
            self.error = e


class LibreTranslateProvider(TranslationProvider):
    """POSTs to ``{base_url}/translate``.

    ``timeout_ms`` is a deadline for the whole call (connect, headers and
    body), not just for each socket read.
    """

    name = 'libretranslate'

    def __init__(self, base_url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS, api_key: str = '',
                 session: requests.Session = None):
        self.base_url = base_url.rstrip('/')
        self.timeout_ms = timeout_ms
        self.api_key = api_key
        self.session = session or requests.Session()

    def translate(self, text: str, source_lang: str, target_lang: str) -> TranslateResult:
        payload = {
            'q': text,
            'source': source_lang,
            'target': target_lang,
            'format': 'text',
        }
        if self.api_key:
            payload['api_key'] = self.api_key

        timeout_s = self.timeout_ms / 1000
        call = _Call(self.session, f'{self.base_url}/translate', payload, timeout_s)
        worker = threading.Thread(target=call.run, name='libretranslate-call', daemon=True)

        started = time.monotonic()
        worker.start()
        worker.join(timeout_s)
        latency_ms = int((time.monotonic() - started) * 1000)

        if worker.is_alive():
            # The worker drops the response as soon as it sees the flag
            call.abandoned.set()
            logger.warning(f"LibreTranslate timeout after {self.timeout_ms}ms")
            raise ProviderTimeout()

        if isinstance(call.error, requests.Timeout):
            logger.warning(f"LibreTranslate timeout after {self.timeout_ms}ms")
            raise ProviderTimeout()
        if call.error is not None:
            logger.warning(f"LibreTranslate network error: {type(call.error).__name__}")
            raise ProviderNetworkError()

        if not call.ok:
            logger.warning(f"LibreTranslate returned HTTP {call.status_code}")
            raise ProviderHTTPError(call.status_code)

        try:
            data = json.loads(call.body)
        except ValueError:
            raise ProviderBadResponse()

        translated_text = data.get('translatedText') if isinstance(data, dict) else None
        if not translated_text or not isinstance(translated_text, str):
            logger.warning("LibreTranslate response missing translatedText")
            raise ProviderBadResponse()

        return TranslateResult(
            translated_text=translated_text,
            detected_source_lang=None if source_lang == AUTO_DETECT else source_lang,
            latency_ms=latency_ms,
            provider=self.name,
        )
