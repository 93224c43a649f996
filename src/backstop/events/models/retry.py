"""Events emitted by the retry handler."""

from pydantic import Field

from ...domain.retry import ErrorKind
from .base import BaseEvent
from .error_info import ErrorInfo


class RetryEvent(BaseEvent):
    """Base class for retry lifecycle events."""

    operation: str = Field(description="Name of the operation being retried")
    event_type: str = Field(default="retry.base")


class RetryScheduledEvent(RetryEvent):
    """Emitted after a retryable failure, before the backoff sleep."""

    event_type: str = Field(default="retry.scheduled")
    attempt: int = Field(ge=1, description="Retry number about to run (1-indexed)")
    max_retries: int = Field(ge=0, description="Maximum retry attempts")
    delay_seconds: float = Field(ge=0, description="Backoff delay before the retry")
    kind: ErrorKind = Field(description="Classification of the failure")
    error: ErrorInfo


class RetryExhaustedEvent(RetryEvent):
    """Emitted when a retryable failure has no attempts or time left."""

    event_type: str = Field(default="retry.exhausted")
    attempts: int = Field(ge=1, description="Total attempts made")
    kind: ErrorKind
    error: ErrorInfo
    budget_exceeded: bool = Field(
        default=False, description="True when the wall-clock ceiling was hit"
    )
