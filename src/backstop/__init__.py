"""backstop - retry and bounded-concurrency batch execution for async operations."""

from .app import App, create_app
from .domain import (
    ApiRequestError,
    BackstopError,
    BatchConfig,
    BatchOperationError,
    BatchResult,
    Classification,
    ErrorKind,
    OperationOutcome,
    QueueConfig,
    RetryBudgetExhaustedError,
    RetryPolicy,
    ValidationError,
)
from .execution import (
    BatchExecutor,
    ErrorClassifier,
    RequestQueue,
    RetryHandler,
    execute_batch,
    execute_batch_settled,
    execute_with_retry,
    with_retry_policy,
)

__all__ = [
    "App",
    "create_app",
    # Configuration and results
    "RetryPolicy",
    "BatchConfig",
    "QueueConfig",
    "BatchResult",
    "OperationOutcome",
    "Classification",
    "ErrorKind",
    # Errors
    "BackstopError",
    "ValidationError",
    "ApiRequestError",
    "RetryBudgetExhaustedError",
    "BatchOperationError",
    # Executors
    "ErrorClassifier",
    "RetryHandler",
    "BatchExecutor",
    "RequestQueue",
    "execute_with_retry",
    "execute_batch",
    "execute_batch_settled",
    "with_retry_policy",
]
