"""Function-style entry points over the retry and batch executors."""

import typing as t

from ..domain.batch import BatchConfig, BatchResult
from ..domain.retry import RetryPolicy
from .batch.executor import BatchExecutor
from .retry.handler import RetryHandler

T = t.TypeVar("T")

Operation = t.Callable[[], t.Awaitable[T]]


async def execute_with_retry(
    operation: Operation[T], policy: RetryPolicy | None = None, name: str = "operation"
) -> T:
    """Run one operation with retries.

    Example:
        >>> result = await execute_with_retry(
        ...     lambda: client.generate("Hello"),
        ...     RetryPolicy(max_retries=5, initial_delay=2.0),
        ... )
    """
    return await RetryHandler(policy).execute_with_retry(operation, name=name)


async def execute_batch(
    operations: t.Sequence[Operation[T]], config: BatchConfig | None = None
) -> list[T]:
    """Run operations in chunks; any failure fails the batch."""
    return await BatchExecutor(config).run(operations)


async def execute_batch_settled(
    operations: t.Sequence[Operation[T]], config: BatchConfig | None = None
) -> BatchResult[T]:
    """Run operations in chunks, returning successes and failures by index."""
    return await BatchExecutor(config).run_settled(operations)


def with_retry_policy(
    policy: RetryPolicy,
) -> t.Callable[[Operation[T]], t.Awaitable[T]]:
    """Return a runner that retries any operation under ``policy``.

    The handler is built once, so the policy is validated up front and the
    runner can be reused across calls.

    Example:
        >>> patient = with_retry_policy(RetryPolicy(max_retries=5))
        >>> result = await patient(lambda: client.generate("Hello"))
    """
    handler = RetryHandler(policy)

    async def run(operation: Operation[T]) -> T:
        return await handler.execute_with_retry(operation)

    return run
