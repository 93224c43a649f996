"""Execution - retry, batch and queue runners."""

from .batch import BatchExecutor
from .helpers import (
    execute_batch,
    execute_batch_settled,
    execute_with_retry,
    with_retry_policy,
)
from .queue import RequestQueue
from .retry import BaseRetryHandler, ErrorClassifier, NullRetryHandler, RetryHandler

__all__ = [
    # Retry
    "BaseRetryHandler",
    "ErrorClassifier",
    "NullRetryHandler",
    "RetryHandler",
    # Batch
    "BatchExecutor",
    # Queue
    "RequestQueue",
    # Functions
    "execute_with_retry",
    "execute_batch",
    "execute_batch_settled",
    "with_retry_policy",
]
