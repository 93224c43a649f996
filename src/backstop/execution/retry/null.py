"""Retry handler that never retries."""

from typing import Awaitable, Callable, TypeVar

from .base import BaseRetryHandler

T = TypeVar("T")


class NullRetryHandler(BaseRetryHandler):
    """Null object implementation: runs the operation exactly once."""

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        name: str = "operation",
        max_retries: int | None = None,
    ) -> T:
        return await operation()
