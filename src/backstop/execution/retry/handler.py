"""Retry handler with exponential backoff."""

import asyncio
import time
import typing as t

from ...domain.exceptions import RetryBudgetExhaustedError, RetryError, ValidationError
from ...domain.retry import Classification, RetryAttempt, RetryPolicy
from ...events import ErrorInfo, EventEmitter, RetryExhaustedEvent, RetryScheduledEvent
from ...events.base import BaseEmitter
from ...infrastructure.logging import get_logger
from .base import BaseRetryHandler
from .classifier import ErrorClassifier

if t.TYPE_CHECKING:
    import loguru

T = t.TypeVar("T")

Clock = t.Callable[[], float]


class RetryHandler(BaseRetryHandler):
    """Handles retry logic with exponential backoff.

    Attempts are strictly sequential. A call makes at most
    ``max_retries + 1`` attempts and never starts an attempt past the
    policy's wall-clock ceiling. ``asyncio.CancelledError`` is not an
    ``Exception`` and always propagates untouched.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
        classifier: ErrorClassifier | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        """
        Initialise retry handler.

        Args:
            policy: Retry policy. If None, the default RetryPolicy is used.
            logger: Logger for recording retry decisions
            emitter: Event emitter for broadcasting retry events.
                    If None, a new EventEmitter will be created.
            classifier: Error classifier deciding which errors are retryable.
                        If None, one is built from the policy's flags.
            clock: Monotonic clock in seconds, used for the wall-clock ceiling
        """
        self.policy = policy or RetryPolicy()
        self.logger = logger
        self.emitter = emitter if emitter is not None else EventEmitter(logger)
        self.classifier = (
            classifier if classifier is not None else ErrorClassifier(self.policy)
        )
        self._clock = clock

    async def execute_with_retry(
        self,
        operation: t.Callable[[], t.Awaitable[T]],
        name: str = "operation",
        max_retries: int | None = None,
    ) -> T:
        """
        Execute async operation with retry on retryable errors.

        Args:
            operation: Zero-argument async callable to execute
            name: Label for the operation (for logging/events)
            max_retries: Override the policy's max_retries (optional)

        Returns:
            Result of the operation

        Raises:
            ValidationError: If max_retries is outside 0..100
            RetryBudgetExhaustedError: If the wall-clock ceiling would be
                crossed before the next attempt
            Exception: The last exception once retries are exhausted, or
                immediately for non-retryable errors
        """
        effective_max_retries = self._resolve_max_retries(max_retries)
        started_at = self._clock()
        last_exception: Exception | None = None

        for attempt in range(effective_max_retries + 1):
            try:
                return await operation()

            except Exception as e:
                last_exception = e
                classification = self.classifier.classify(e)

                if not self._should_retry(e, classification, attempt):
                    self.logger.debug(
                        f"Non-retryable error ({classification.kind.value}), "
                        f"not retrying {name}: {e}"
                    )
                    raise

                if attempt >= effective_max_retries:
                    self.logger.error(
                        f"{name} failed after {effective_max_retries} retries: {e}"
                    )
                    await self._emit_exhausted(name, attempt + 1, classification, e)
                    raise

                delay = self.policy.calculate_delay(attempt)
                state = RetryAttempt(
                    attempt=attempt, elapsed=self._clock() - started_at, error=e
                )

                if state.elapsed + delay >= self.policy.max_elapsed:
                    self.logger.error(
                        f"Retry budget of {self.policy.max_elapsed:.2f}s exhausted "
                        f"for {name} after {attempt + 1} attempt(s)"
                    )
                    await self._emit_exhausted(
                        name, attempt + 1, classification, e, budget_exceeded=True
                    )
                    raise RetryBudgetExhaustedError(
                        elapsed=state.elapsed,
                        max_elapsed=self.policy.max_elapsed,
                        attempts=attempt + 1,
                        last_error=e,
                    ) from e

                await self.emitter.emit(
                    "retry.scheduled",
                    RetryScheduledEvent(
                        operation=name,
                        attempt=attempt + 1,
                        max_retries=effective_max_retries,
                        delay_seconds=delay,
                        kind=classification.kind,
                        error=ErrorInfo.from_exception(e),
                    ),
                )

                self.logger.warning(
                    f"Retrying {name} (attempt {attempt + 2}/"
                    f"{effective_max_retries + 1}) in {delay:.2f}s "
                    f"after {classification.kind.value}: {e}"
                )

                await asyncio.sleep(delay)

        # Should never reach here, but handle edge case
        if last_exception:
            raise last_exception

        raise RetryError("Retry loop completed without returning or raising")

    def _resolve_max_retries(self, max_retries: int | None) -> int:
        if max_retries is None:
            return self.policy.max_retries
        if not 0 <= max_retries <= 100:
            raise ValidationError(
                f"max_retries must be between 0 and 100, got {max_retries}",
                field="max_retries",
            )
        return max_retries

    def _should_retry(
        self, error: Exception, classification: Classification, attempt: int
    ) -> bool:
        """Apply the classification, then let should_retry veto."""
        if not classification.retryable:
            return False

        predicate = self.policy.should_retry
        if predicate is None:
            return True

        try:
            allowed = predicate(error, attempt)
        except Exception:
            self.logger.exception(
                f"should_retry raised on attempt {attempt}; treating as a veto"
            )
            return False

        if not allowed:
            self.logger.debug(f"Retry vetoed by should_retry on attempt {attempt}")
            return False

        return True

    async def _emit_exhausted(
        self,
        name: str,
        attempts: int,
        classification: Classification,
        error: Exception,
        budget_exceeded: bool = False,
    ) -> None:
        await self.emitter.emit(
            "retry.exhausted",
            RetryExhaustedEvent(
                operation=name,
                attempts=attempts,
                kind=classification.kind,
                error=ErrorInfo.from_exception(error),
                budget_exceeded=budget_exceeded,
            ),
        )
