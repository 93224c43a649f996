"""Chunked concurrent execution of many operations."""

import asyncio
import inspect
import typing as t

from ...domain.batch import BatchConfig, BatchResult, OperationOutcome
from ...domain.exceptions import BatchOperationError, ValidationError
from ...events import (
    BatchCompletedEvent,
    BatchProgressEvent,
    BatchStartedEvent,
    BatchUnitFailedEvent,
    ErrorInfo,
    EventEmitter,
)
from ...events.base import BaseEmitter
from ...infrastructure.logging import get_logger
from ..retry.base import BaseRetryHandler
from ..retry.handler import RetryHandler
from ..retry.null import NullRetryHandler

if t.TYPE_CHECKING:
    from loguru import Logger

T = t.TypeVar("T")

Operation = t.Callable[[], t.Awaitable[T]]


class BatchExecutor:
    """Runs operations in fixed-size concurrent chunks.

    Operations are split into sequential chunks of ``config.concurrency``.
    Every operation in a chunk runs concurrently; the next chunk starts only
    once the whole chunk has settled, so at most ``concurrency`` operations
    are ever in flight.

    Failure policy:
    - ``run()`` (fail-fast): after a chunk settles, the lowest-index failure
      in it is raised as ``BatchOperationError`` and remaining chunks are
      abandoned. Results of siblings in the same chunk are discarded.
    - ``run_settled()`` (partial success): every operation runs and the
      returned ``BatchResult`` marks failures at their input index. If every
      operation failed, the first failure is raised instead.

    Implementation decisions:
    - Each unit writes its outcome into its own pre-reserved slot, so result
      storage needs no locking and input order is preserved
    - Progress counters are only updated by the coordinating coroutine at
      chunk boundaries, never from inside concurrent units
    - Progress callback and event handler failures are logged and swallowed;
      observers cannot fail the batch

    Usage:
        executor = BatchExecutor(BatchConfig(concurrency=5))
        results = await executor.run([lambda: fetch(1), lambda: fetch(2)])
    """

    def __init__(
        self,
        config: BatchConfig | None = None,
        logger: "Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
        retry_handler: BaseRetryHandler | None = None,
    ) -> None:
        """Initialise the batch executor.

        Args:
            config: Batch configuration. If None, BatchConfig defaults are used.
            logger: Logger for recording unit failures and callback errors
            emitter: Event emitter for batch events. If None, a new
                    EventEmitter is created so callers can subscribe via
                    ``executor.emitter``.
            retry_handler: Handler wrapping each unit when ``config.retry`` is
                    enabled. If None, a RetryHandler using
                    ``config.retry_policy`` is created. Ignored when retry is
                    disabled.
        """
        self.config = config or BatchConfig()
        self._logger = logger
        self.emitter = emitter if emitter is not None else EventEmitter(logger)

        if not self.config.retry:
            self._retry_handler: BaseRetryHandler = NullRetryHandler()
        elif retry_handler is not None:
            self._retry_handler = retry_handler
        else:
            self._retry_handler = RetryHandler(
                self.config.retry_policy, logger=logger, emitter=self.emitter
            )

    @property
    def retry_handler(self) -> BaseRetryHandler:
        return self._retry_handler

    async def run(self, operations: t.Sequence[Operation[T]]) -> list[T]:
        """Run all operations, failing the batch on the first failure.

        Returns:
            Results in input order

        Raises:
            ValidationError: If any operation is not callable (nothing runs)
            BatchOperationError: For the first failed operation, carrying its
                index and original error
        """
        result = await self._execute(operations, fail_fast=True)
        return [t.cast(T, outcome.value) for outcome in result]

    async def run_settled(self, operations: t.Sequence[Operation[T]]) -> BatchResult[T]:
        """Run all operations, collecting failures instead of aborting.

        Raises:
            ValidationError: If any operation is not callable (nothing runs)
            BatchOperationError: Only if every operation failed
        """
        return await self._execute(operations, fail_fast=False)

    async def _execute(
        self, operations: t.Sequence[Operation[T]], fail_fast: bool
    ) -> BatchResult[T]:
        operations = list(operations)
        self._validate_operations(operations)

        total = len(operations)
        if total == 0:
            return BatchResult()

        concurrency = self.config.concurrency
        await self.emitter.emit(
            "batch.started", BatchStartedEvent(total=total, concurrency=concurrency)
        )

        outcomes: list[OperationOutcome[T] | None] = [None] * total
        completed = 0
        failed = 0

        for chunk_start in range(0, total, concurrency):
            chunk = range(chunk_start, min(chunk_start + concurrency, total))
            await asyncio.gather(
                *(
                    self._run_unit(index, operations[index], total, outcomes)
                    for index in chunk
                )
            )

            chunk_failures = [
                outcome
                for outcome in (outcomes[index] for index in chunk)
                if outcome is not None and not outcome.ok
            ]
            completed += len(chunk)
            failed += len(chunk_failures)
            await self._report_progress(completed, total, failed)

            if fail_fast and chunk_failures:
                first = chunk_failures[0]
                await self._emit_completed(
                    total, completed - failed, failed, aborted=completed < total
                )
                raise BatchOperationError(
                    index=first.index, total=total, error=first.error
                ) from first.error

        settled = [t.cast(OperationOutcome[T], outcome) for outcome in outcomes]
        await self._emit_completed(total, total - failed, failed)

        if failed == total:
            first = settled[0]
            raise BatchOperationError(
                index=first.index, total=total, error=first.error
            ) from first.error

        return BatchResult(tuple(settled))

    async def _run_unit(
        self,
        index: int,
        operation: Operation[T],
        total: int,
        outcomes: list[OperationOutcome[T] | None],
    ) -> None:
        """Run one operation and store its outcome in its own slot."""
        try:
            value = await self._retry_handler.execute_with_retry(
                operation, name=f"batch[{index}]"
            )
        except Exception as exc:
            self._logger.error(
                f"Batch operation {index} of {total} failed: "
                f"{type(exc).__name__}: {exc}"
            )
            outcomes[index] = OperationOutcome(index=index, error=exc)
            await self.emitter.emit(
                "batch.unit_failed",
                BatchUnitFailedEvent(
                    total=total, index=index, error=ErrorInfo.from_exception(exc)
                ),
            )
        else:
            outcomes[index] = OperationOutcome(index=index, value=value)

    async def _report_progress(self, completed: int, total: int, failed: int) -> None:
        await self.emitter.emit(
            "batch.progress",
            BatchProgressEvent(total=total, completed=completed, failed=failed),
        )

        callback = self.config.on_progress
        if callback is None:
            return

        try:
            result = callback(completed, total)
            if inspect.isawaitable(result):
                await result
        except Exception:
            self._logger.exception(
                f"Progress callback failed at {completed}/{total}; continuing batch"
            )

    async def _emit_completed(
        self, total: int, succeeded: int, failed: int, aborted: bool = False
    ) -> None:
        await self.emitter.emit(
            "batch.completed",
            BatchCompletedEvent(
                total=total, succeeded=succeeded, failed=failed, aborted=aborted
            ),
        )

    @staticmethod
    def _validate_operations(operations: list[t.Any]) -> None:
        for index, operation in enumerate(operations):
            if not callable(operation):
                raise ValidationError(
                    f"operations[{index}] must be callable, "
                    f"got {type(operation).__name__}",
                    field=f"operations[{index}]",
                )
