"""Custom exceptions for backstop."""


class BackstopError(Exception):
    """Base exception for all backstop errors."""

    pass


class ValidationError(BackstopError):
    """Raised when the caller supplied invalid input.

    Validation failures are caller mistakes and are never retried.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class ApiRequestError(BackstopError):
    """Raised by an operation when its remote call fails.

    Operations should raise this (or any exception exposing an integer
    ``status_code`` or ``status`` attribute) so failures can be classified.
    Without a status code the error is classified from its message only.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is None:
            return message
        return f"[{self.status_code}] {message}"


class RetryError(BackstopError):
    """Raised when retry logic encounters an unexpected state.

    This indicates a programming error in the retry handler, such as
    completing the retry loop without returning or raising.
    """

    pass


class RetryBudgetExhaustedError(BackstopError):
    """Raised when the wall-clock retry ceiling is reached.

    Distinguishes infrastructure timeouts from the remote service rejecting
    the request. The last operation error is available as ``last_error``
    and as ``__cause__``.
    """

    def __init__(
        self,
        *,
        elapsed: float,
        max_elapsed: float,
        attempts: int,
        last_error: BaseException,
    ) -> None:
        self.elapsed = elapsed
        self.max_elapsed = max_elapsed
        self.attempts = attempts
        self.last_error = last_error
        message = (
            f"Retry budget exhausted: {elapsed:.2f}s elapsed of {max_elapsed:.2f}s "
            f"allowed after {attempts} attempt(s). "
            f"Last error: {type(last_error).__name__}: {last_error}"
        )
        super().__init__(message)


class BatchOperationError(BackstopError):
    """Raised when an operation in a batch fails terminally.

    The original exception is kept on ``error`` (and chained as
    ``__cause__``) so callers can still inspect its classification.
    """

    def __init__(self, *, index: int, total: int, error: BaseException) -> None:
        self.index = index
        self.total = total
        self.error = error
        message = (
            f"Batch operation {index} of {total} failed: "
            f"{type(error).__name__}: {error}"
        )
        super().__init__(message)


class QueueError(BackstopError):
    """Base exception for request queue errors."""

    pass


class QueueFullError(QueueError):
    """Raised when submitting to a queue at its maximum size."""

    pass


class QueueClearedError(QueueError):
    """Raised for pending submissions when the queue is cleared."""

    pass


class QueueNotStartedError(QueueError):
    """Raised when submitting to a queue whose workers are not running."""

    pass
