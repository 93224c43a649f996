"""Events emitted by the request queue."""

from pydantic import Field

from .base import BaseEvent


class RequestRequeuedEvent(BaseEvent):
    """Emitted when a rate-limited request is put back on the queue."""

    event_type: str = Field(default="queue.requeued")
    priority: int = Field(description="Priority the request was re-queued with")
    requeues: int = Field(ge=1, description="Times this request has been re-queued")
