"""Domain models for batch execution."""

import typing as t
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from .retry import RetryPolicy

T = t.TypeVar("T")

ProgressCallback = t.Callable[[int, int], t.Awaitable[None] | None]

# Batch units get a smaller retry budget than single calls to bound batch latency
BATCH_MAX_RETRIES: t.Final = 2


def _default_batch_policy() -> RetryPolicy:
    return RetryPolicy(max_retries=BATCH_MAX_RETRIES)


class BatchConfig(BaseModel):
    """Configuration for running a batch of operations.

    Operations run in sequential chunks of ``concurrency``; every chunk
    settles before the next one starts.
    """

    model_config = ConfigDict(frozen=True)

    concurrency: int = Field(default=3, ge=1, le=100)
    retry: bool = Field(
        default=True, description="Wrap each operation in the retry handler"
    )
    on_progress: ProgressCallback | None = Field(default=None, exclude=True)
    retry_policy: RetryPolicy = Field(default_factory=_default_batch_policy)


@dataclass(frozen=True)
class OperationOutcome(t.Generic[T]):
    """Result of one batch operation, at its original input index."""

    index: int
    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class BatchResult(t.Generic[T]):
    """Ordered outcomes of a batch, one per input operation."""

    outcomes: tuple[OperationOutcome[T], ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self) -> t.Iterator[OperationOutcome[T]]:
        return iter(self.outcomes)

    def __getitem__(self, index: int) -> OperationOutcome[T]:
        return self.outcomes[index]

    @property
    def successes(self) -> list[OperationOutcome[T]]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failures(self) -> list[OperationOutcome[T]]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def succeeded(self) -> int:
        return len(self.successes)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def all_succeeded(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    def values(self) -> list[T | None]:
        """Values in input order, with None at failed indices."""
        return [outcome.value for outcome in self.outcomes]
