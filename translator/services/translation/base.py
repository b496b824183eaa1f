"""Provider capability and the failures a provider may raise."""

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional


class TranslateResult(NamedTuple):
    translated_text: str
    detected_source_lang: Optional[str]
    latency_ms: Optional[int]
    provider: str


class ProviderError(Exception):
    """A translation engine call failed.

    ``code`` is stable and is what gets recorded as the row's error_code and
    returned to the client as errorCode.
    """

    code = 'PROVIDER_ERROR'

    def __str__(self):
        return self.code


class ProviderTimeout(ProviderError):
    code = 'TIMEOUT'


class ProviderNetworkError(ProviderError):
    code = 'NETWORK_ERROR'


class ProviderHTTPError(ProviderError):

    def __init__(self, status: int):
        super().__init__(status)
        self.status = status

    @property
    def code(self):
        return f'HTTP_{self.status}'


class ProviderBadResponse(ProviderError):
    code = 'BAD_RESPONSE'


class TranslationProvider(ABC):
    """A single translation engine. One attempt per call, no retries."""

    name = 'unknown'

    @abstractmethod
    def translate(self, text: str, source_lang: str, target_lang: str) -> TranslateResult:
        """Translate text or raise a ProviderError subclass."""
