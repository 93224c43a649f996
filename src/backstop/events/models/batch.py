"""Events emitted by the batch executor."""

from pydantic import Field, computed_field

from .base import BaseEvent
from .error_info import ErrorInfo


class BatchEvent(BaseEvent):
    """Base class for batch lifecycle events."""

    total: int = Field(ge=0, description="Number of operations in the batch")
    event_type: str = Field(default="batch.base")


class BatchStartedEvent(BatchEvent):
    event_type: str = Field(default="batch.started")
    concurrency: int = Field(ge=1)


class BatchProgressEvent(BatchEvent):
    """Emitted after each chunk settles."""

    event_type: str = Field(default="batch.progress")
    completed: int = Field(ge=0, description="Operations settled so far")
    failed: int = Field(default=0, ge=0, description="Failures settled so far")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def progress_fraction(self) -> float:
        if self.total == 0:
            return 1.0
        return min(self.completed / self.total, 1.0)


class BatchUnitFailedEvent(BatchEvent):
    """Emitted for each operation that failed after its retries."""

    event_type: str = Field(default="batch.unit_failed")
    index: int = Field(ge=0, description="Input index of the failed operation")
    error: ErrorInfo


class BatchCompletedEvent(BatchEvent):
    event_type: str = Field(default="batch.completed")
    succeeded: int = Field(ge=0)
    failed: int = Field(ge=0)
    aborted: bool = Field(
        default=False, description="True when remaining chunks were abandoned"
    )
