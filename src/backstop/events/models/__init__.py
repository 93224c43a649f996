"""Event data models."""

from .base import BaseEvent
from .batch import (
    BatchCompletedEvent,
    BatchEvent,
    BatchProgressEvent,
    BatchStartedEvent,
    BatchUnitFailedEvent,
)
from .error_info import ErrorInfo
from .queue import RequestRequeuedEvent
from .retry import RetryEvent, RetryExhaustedEvent, RetryScheduledEvent

__all__ = [
    "BaseEvent",
    "ErrorInfo",
    "RetryEvent",
    "RetryScheduledEvent",
    "RetryExhaustedEvent",
    "BatchEvent",
    "BatchStartedEvent",
    "BatchProgressEvent",
    "BatchUnitFailedEvent",
    "BatchCompletedEvent",
    "RequestRequeuedEvent",
]
