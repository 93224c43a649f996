"""Domain models for error classification and retry policies."""

import enum
import random
import typing as t
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Random spread applied to each delay, as a fraction of the delay
JITTER_FRACTION: t.Final = 0.2

ShouldRetry = t.Callable[[BaseException, int], bool]


class ErrorKind(enum.StrEnum):
    """Classification of operation errors for retry decisions."""

    VALIDATION = "validation"  # Caller mistake, never retry
    RATE_LIMITED = "rate_limited"  # 429
    SERVER_ERROR = "server_error"  # 5xx
    NETWORK_ERROR = "network_error"  # No status, network vocabulary
    CLIENT_ERROR = "client_error"  # Other 4xx, never retry
    UNKNOWN = "unknown"  # Conservative: never retry


@dataclass(frozen=True)
class Classification:
    """Judgment about a single error."""

    kind: ErrorKind
    retryable: bool


class RetryPolicy(BaseModel):
    """Retry behaviour with exponential backoff.

    Delays are in seconds. ``should_retry`` is consulted after
    classification and can only veto a retry, never force one, so
    validation and client errors stay non-retryable whatever it returns.
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0, le=100)
    initial_delay: float = Field(default=1.0, ge=0, le=60)
    max_delay: float = Field(default=30.0, ge=0)
    backoff_multiplier: float = Field(default=2.0, ge=1, le=10)
    retry_on_rate_limit: bool = True
    retry_on_server_error: bool = True
    should_retry: ShouldRetry | None = Field(default=None, exclude=True)
    jitter: bool = True
    max_elapsed: float = Field(
        default=300.0,
        gt=0,
        description="Wall-clock ceiling across all attempts of one call",
    )

    @model_validator(mode="after")
    def _validate_delays(self) -> "RetryPolicy":
        if self.max_delay < self.initial_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must be >= "
                f"initial_delay ({self.initial_delay})"
            )
        return self

    def backoff_delay(self, attempt: int) -> float:
        """
        Pre-jitter delay before the retry following ``attempt``.

        Formula: min(initial_delay * (backoff_multiplier ^ attempt), max_delay)

        Args:
            attempt: Attempt that just failed (0-indexed)

        Examples:
            >>> policy = RetryPolicy(initial_delay=1.0, backoff_multiplier=2.0)
            >>> policy.backoff_delay(0)
            1.0
            >>> policy.backoff_delay(2)
            4.0
        """
        delay = self.initial_delay * (self.backoff_multiplier**attempt)
        return min(delay, self.max_delay)

    def calculate_delay(self, attempt: int) -> float:
        """Delay with symmetric ±20% jitter applied, never negative."""
        delay = self.backoff_delay(attempt)

        if self.jitter:
            spread = delay * JITTER_FRACTION
            delay = delay + random.uniform(-spread, spread)
            delay = max(0.0, delay)

        return delay

    def schedule(self, attempts: int | None = None) -> list[float]:
        """Pre-jitter delays for each retry, ``max_retries`` long by default."""
        count = self.max_retries if attempts is None else attempts
        return [self.backoff_delay(attempt) for attempt in range(count)]


class RetryAttempt(BaseModel):
    """Snapshot of a retry loop at the moment an attempt failed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    attempt: int = Field(ge=0, description="Attempt that failed (0-indexed)")
    elapsed: float = Field(ge=0, description="Seconds since the first attempt")
    error: BaseException
