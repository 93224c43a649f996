"""Retry handling - classification and exponential backoff."""

from .base import BaseRetryHandler
from .classifier import ErrorClassifier
from .handler import RetryHandler
from .null import NullRetryHandler

__all__ = [
    "BaseRetryHandler",
    "ErrorClassifier",
    "NullRetryHandler",
    "RetryHandler",
]
