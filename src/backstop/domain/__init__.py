"""Domain models - configuration, classification and results."""

from .batch import BatchConfig, BatchResult, OperationOutcome
from .exceptions import (
    ApiRequestError,
    BackstopError,
    BatchOperationError,
    QueueClearedError,
    QueueError,
    QueueFullError,
    QueueNotStartedError,
    RetryBudgetExhaustedError,
    RetryError,
    ValidationError,
)
from .queue import QueueConfig, QueueStatus
from .retry import Classification, ErrorKind, RetryAttempt, RetryPolicy

__all__ = [
    # Retry
    "Classification",
    "ErrorKind",
    "RetryAttempt",
    "RetryPolicy",
    # Batch
    "BatchConfig",
    "BatchResult",
    "OperationOutcome",
    # Queue
    "QueueConfig",
    "QueueStatus",
    # Exceptions
    "BackstopError",
    "ValidationError",
    "ApiRequestError",
    "RetryError",
    "RetryBudgetExhaustedError",
    "BatchOperationError",
    "QueueError",
    "QueueFullError",
    "QueueClearedError",
    "QueueNotStartedError",
]
