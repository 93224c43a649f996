"""Base class for all event models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class BaseEvent(BaseModel):
    """Immutable event with a UTC timestamp."""

    model_config = ConfigDict(frozen=True)

    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)",
    )
    event_type: str = Field(default="base", description="Event type identifier")
