"""Process-local translation cache with TTL and a soft size bound.

Losing the cache is always safe: a miss just means the engine is called again.
Keys embed the requesting user id so cached output is never shared across
users, and the source text only appears as a salted fingerprint.
"""

import threading
from typing import NamedTuple, Optional

from translator.services.rate_limit import now_ms


class CachedTranslation(NamedTuple):
    translated_text: str
    provider: str
    detected_source_lang: Optional[str]


def make_cache_key(user_id, source_lang: str, target_lang: str, text_hash: str) -> str:
    return f't:{user_id}:{source_lang}:{target_lang}:{text_hash}'


class TranslationCache:
    """Bounded TTL store; eviction drops expired entries, then oldest inserted."""

    def __init__(self, ttl_ms: int = 5 * 60_000, max_entries: int = 500, clock=now_ms):
        self.ttl_ms = ttl_ms
        self.max_entries = max_entries
        self._clock = clock
        # key -> (CachedTranslation, expires_at); dicts keep insertion order
        self._entries: dict[str, tuple[CachedTranslation, int]] = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries

    def get(self, key: str) -> Optional[CachedTranslation]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: CachedTranslation, ttl_ms: Optional[int] = None):
        with self._lock:
            now = self._clock()
            # Re-inserting moves the key to the back of the eviction order
            self._entries.pop(key, None)
            self._entries[key] = (value, now + (ttl_ms or self.ttl_ms))
            if len(self._entries) > self.max_entries:
                self._prune(now)

    def _prune(self, now: int):
        expired = [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]
        for k in expired:
            del self._entries[k]

        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

    def clear(self):
        with self._lock:
            self._entries.clear()
