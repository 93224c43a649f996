"""Error classification for retry decisions."""

import asyncio
import re
import typing as t

import aiohttp
import pydantic

from ...domain.exceptions import ValidationError
from ...domain.retry import Classification, ErrorKind, RetryPolicy

_NETWORK_ERROR_TYPES: t.Final = (
    asyncio.TimeoutError,
    ConnectionError,
    aiohttp.ClientConnectionError,
    aiohttp.ClientPayloadError,
)

_NETWORK_VOCABULARY: t.Final = re.compile(
    r"network|timeout|timed out|econnreset|econnrefused|enotfound"
    r"|connection (?:reset|refused|aborted)|dns|name resolution",
    re.IGNORECASE,
)


class ErrorClassifier:
    """Maps an exception to a ``Classification``.

    Rules, in priority order:

    1. Validation failures (``ValidationError``, pydantic's
       ``ValidationError``) are never retried.
    2. Errors carrying an integer ``status_code`` or ``status``:
       429 is RATE_LIMITED, 5xx is SERVER_ERROR, other 4xx is
       CLIENT_ERROR (never retried). Other codes are UNKNOWN.
    3. Without a status code, network failures (recognised by type or by
       message) are NETWORK_ERROR and retried like server errors.
    4. Anything else is UNKNOWN and never retried.

    Classification is a pure function of the error and the policy flags.
    """

    def __init__(self, policy: RetryPolicy | None = None) -> None:
        self.policy = policy or RetryPolicy()

    def classify(self, error: BaseException) -> Classification:
        if isinstance(error, (ValidationError, pydantic.ValidationError)):
            return Classification(ErrorKind.VALIDATION, retryable=False)

        status = self.status_code_of(error)
        if status is not None:
            return self._classify_status(status)

        # SSL failures subclass connection errors but retrying cannot fix them
        if isinstance(error, aiohttp.ClientSSLError):
            return Classification(ErrorKind.UNKNOWN, retryable=False)

        if self._is_network_error(error):
            return Classification(
                ErrorKind.NETWORK_ERROR, retryable=self.policy.retry_on_server_error
            )

        return Classification(ErrorKind.UNKNOWN, retryable=False)

    def is_retryable(self, error: BaseException) -> bool:
        """Convenience method returning only the retry decision."""
        return self.classify(error).retryable

    @staticmethod
    def status_code_of(error: BaseException) -> int | None:
        """Extract an HTTP-like status code from ``status_code`` or ``status``."""
        for attribute in ("status_code", "status"):
            value = getattr(error, attribute, None)
            # bool is an int subclass but never a status code
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        return None

    def _classify_status(self, status: int) -> Classification:
        if status == 429:
            return Classification(
                ErrorKind.RATE_LIMITED, retryable=self.policy.retry_on_rate_limit
            )
        if 500 <= status <= 599:
            return Classification(
                ErrorKind.SERVER_ERROR, retryable=self.policy.retry_on_server_error
            )
        if 400 <= status <= 499:
            return Classification(ErrorKind.CLIENT_ERROR, retryable=False)
        return Classification(ErrorKind.UNKNOWN, retryable=False)

    def _is_network_error(self, error: BaseException) -> bool:
        original = getattr(error, "original_error", None)
        for candidate in (error, original):
            if candidate is None:
                continue
            if isinstance(candidate, _NETWORK_ERROR_TYPES):
                return True
            if _NETWORK_VOCABULARY.search(str(candidate)):
                return True
        return False
