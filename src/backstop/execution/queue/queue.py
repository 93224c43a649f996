"""Priority request queue with bounded concurrency and pacing.

Callers submit operations and await their results; a fixed set of worker
tasks drains an ``asyncio.PriorityQueue`` while enforcing a minimum gap
between request starts. Rate-limited failures are re-queued instead of
being returned to the caller.
"""

import asyncio
import re
import time
import typing as t
from dataclasses import dataclass, field

from ...domain.exceptions import (
    QueueClearedError,
    QueueFullError,
    QueueNotStartedError,
    ValidationError,
)
from ...domain.queue import QueueConfig, QueueStatus
from ...domain.retry import ErrorKind
from ...events import NullEmitter, RequestRequeuedEvent
from ...events.base import BaseEmitter
from ...infrastructure.logging import get_logger
from ..retry.classifier import ErrorClassifier

if t.TYPE_CHECKING:
    from loguru import Logger

T = t.TypeVar("T")

# Recognises rate limiting from the message of errors that carry no status code
_RATE_LIMIT_MESSAGE: t.Final = re.compile(r"rate limit|429", re.IGNORECASE)


@dataclass(eq=False)
class _QueuedRequest:
    operation: t.Callable[[], t.Awaitable[t.Any]]
    future: "asyncio.Future[t.Any]"
    priority: int = 0
    requeues: int = field(default=0)


class RequestQueue:
    """Runs submitted operations by priority with at most N in flight.

    Key features:
    - Higher priority numbers run first (5 > 3 > 1), FIFO within a priority
    - ``max_concurrent`` worker tasks, each running one request at a time
    - At least ``min_delay`` seconds between consecutive request starts
    - Rate-limited failures go back to the front of the next-lower priority
      band, up to ``max_rate_limit_requeues`` times

    Usage:
        async with RequestQueue(QueueConfig(max_concurrent=5)) as queue:
            result = await queue.submit(lambda: client.fetch("a"), priority=2)
    """

    def __init__(
        self,
        config: QueueConfig | None = None,
        classifier: ErrorClassifier | None = None,
        logger: "Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
        clock: t.Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialise the request queue.

        Args:
            config: Queue configuration. If None, QueueConfig defaults are used.
            classifier: Classifier used to recognise rate-limit failures.
            logger: Logger for recording queue activity
            emitter: Event emitter for queue.requeued events. If None, a
                    NullEmitter is used (no events emitted).
            clock: Monotonic clock in seconds, used for request pacing
        """
        self.config = config or QueueConfig()
        self._classifier = classifier or ErrorClassifier()
        self._logger = logger
        self._emitter = emitter or NullEmitter()
        self._clock = clock
        self._queue: asyncio.PriorityQueue[tuple[int, int, _QueuedRequest]] = (
            asyncio.PriorityQueue()
        )
        # Sequence numbers keep FIFO order within a priority; re-queued
        # requests take decreasing numbers so they jump their band
        self._counter = 0
        self._front_counter = 0
        self._running = 0
        self._worker_tasks: list[asyncio.Task[None]] = []
        self._pace_lock = asyncio.Lock()
        self._last_start: float | None = None

    @property
    def is_running(self) -> bool:
        return bool(self._worker_tasks)

    @property
    def emitter(self) -> BaseEmitter:
        return self._emitter

    async def __aenter__(self) -> "RequestQueue":
        await self.start()
        return self

    async def __aexit__(self, exc_type: t.Any, exc: t.Any, tb: t.Any) -> None:
        # A failing body may be what pending requests were waiting on
        await self.shutdown(wait_for_pending=exc_type is None)

    async def start(self) -> None:
        """Start the worker tasks. Idempotent."""
        if self.is_running:
            return
        for _ in range(self.config.max_concurrent):
            self._worker_tasks.append(asyncio.create_task(self._process_queue()))

    async def shutdown(self, wait_for_pending: bool = True) -> None:
        """Stop the workers.

        Args:
            wait_for_pending: If True, let every queued request finish first.
                If False, cancel in-flight requests and reject queued ones
                with QueueClearedError.
        """
        if wait_for_pending and self.is_running:
            await self._queue.join()

        for task in self._worker_tasks:
            task.cancel()
        await asyncio.gather(*self._worker_tasks, return_exceptions=True)
        self._worker_tasks.clear()
        self.clear()

    async def submit(
        self, operation: t.Callable[[], t.Awaitable[T]], priority: int = 0
    ) -> T:
        """Queue an operation and wait for its result.

        Raises:
            ValidationError: If operation is not callable
            QueueNotStartedError: If the workers are not running
            QueueFullError: If max_queue_size requests are already waiting
            QueueClearedError: If the queue is cleared before the request runs
            Exception: Whatever the operation itself raised
        """
        if not callable(operation):
            raise ValidationError("operation must be callable", field="operation")
        if not self.is_running:
            raise QueueNotStartedError(
                "RequestQueue must be started or used as a context manager"
            )
        if self._queue.qsize() >= self.config.max_queue_size:
            raise QueueFullError(
                f"Queue is full (max size: {self.config.max_queue_size})"
            )

        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._put(_QueuedRequest(operation=operation, future=future, priority=priority))
        return await future

    def status(self) -> QueueStatus:
        return QueueStatus(queued=self._queue.qsize(), running=self._running)

    def clear(self) -> int:
        """Reject every queued (not yet running) request.

        Returns:
            Number of requests rejected
        """
        rejected = 0
        while not self._queue.empty():
            _, _, request = self._queue.get_nowait()
            if not request.future.done():
                request.future.set_exception(QueueClearedError("Queue was cleared"))
                rejected += 1
            self._queue.task_done()

        if rejected:
            self._logger.debug(f"Cleared {rejected} queued request(s)")
        return rejected

    def _put(self, request: _QueuedRequest, front: bool = False) -> None:
        if front:
            self._front_counter -= 1
            sequence = self._front_counter
        else:
            sequence = self._counter
            self._counter += 1
        # Negate priority for min-heap behaviour (higher priority = lower number)
        self._queue.put_nowait((-request.priority, sequence, request))

    async def _process_queue(self) -> None:
        """Run requests from the queue until cancelled."""
        while True:
            _, _, request = await self._queue.get()
            try:
                # Submitter gave up (cancelled) while the request waited
                if request.future.done():
                    continue
                await self._pace()
                await self._run_request(request)
            except asyncio.CancelledError:
                if not request.future.done():
                    request.future.cancel()
                raise
            finally:
                self._queue.task_done()

    async def _run_request(self, request: _QueuedRequest) -> None:
        self._running += 1
        try:
            result = await request.operation()
        except Exception as exc:
            if self._should_requeue(request, exc):
                await self._requeue(request)
            elif not request.future.done():
                request.future.set_exception(exc)
        else:
            if not request.future.done():
                request.future.set_result(result)
        finally:
            self._running -= 1

    async def _pace(self) -> None:
        """Wait until min_delay has passed since the previous request start."""
        async with self._pace_lock:
            if self._last_start is not None:
                wait = self.config.min_delay - (self._clock() - self._last_start)
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_start = self._clock()

    def _should_requeue(self, request: _QueuedRequest, exc: Exception) -> bool:
        if not self.config.auto_retry_on_rate_limit:
            return False
        if request.requeues >= self.config.max_rate_limit_requeues:
            return False
        return self._is_rate_limited(exc)

    def _is_rate_limited(self, exc: Exception) -> bool:
        if self._classifier.classify(exc).kind == ErrorKind.RATE_LIMITED:
            return True
        if self._classifier.status_code_of(exc) is not None:
            return False
        return bool(_RATE_LIMIT_MESSAGE.search(str(exc)))

    async def _requeue(self, request: _QueuedRequest) -> None:
        request.requeues += 1
        request.priority -= 1
        self._put(request, front=True)
        self._logger.warning(
            f"Rate limited, re-queued request with priority {request.priority} "
            f"(requeue {request.requeues}/{self.config.max_rate_limit_requeues})"
        )
        await self._emitter.emit(
            "queue.requeued",
            RequestRequeuedEvent(priority=request.priority, requeues=request.requeues),
        )
