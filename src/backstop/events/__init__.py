"""Event infrastructure - event emitter and event types."""

from .base import BaseEmitter
from .emitter import EventEmitter
from .models import (
    BaseEvent,
    BatchCompletedEvent,
    BatchEvent,
    BatchProgressEvent,
    BatchStartedEvent,
    BatchUnitFailedEvent,
    ErrorInfo,
    RequestRequeuedEvent,
    RetryEvent,
    RetryExhaustedEvent,
    RetryScheduledEvent,
)
from .null import NullEmitter

__all__ = [
    # Base and implementations
    "BaseEmitter",
    "EventEmitter",
    "NullEmitter",
    # Models
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
