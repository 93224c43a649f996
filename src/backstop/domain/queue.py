"""Domain models for the request queue."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class QueueConfig(BaseModel):
    """Configuration for a RequestQueue. Delays are in seconds."""

    model_config = ConfigDict(frozen=True)

    max_concurrent: int = Field(default=10, ge=1, le=100)
    min_delay: float = Field(
        default=0.1, ge=0, le=60, description="Minimum gap between request starts"
    )
    auto_retry_on_rate_limit: bool = True
    max_queue_size: int = Field(default=1000, ge=1, le=10000)
    max_rate_limit_requeues: int = Field(default=5, ge=0, le=100)


@dataclass(frozen=True)
class QueueStatus:
    """Point-in-time view of queue occupancy."""

    queued: int
    running: int

    @property
    def total(self) -> int:
        return self.queued + self.running
