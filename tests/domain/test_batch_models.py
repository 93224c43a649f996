"""Tests for batch domain models."""

import pytest
from pydantic import ValidationError

from backstop.domain.batch import BatchConfig, BatchResult, OperationOutcome
from backstop.domain.retry import RetryPolicy


class TestBatchConfig:
    """Test batch configuration validation."""

    def test_defaults(self):
        config = BatchConfig()

        assert config.concurrency == 3
        assert config.retry is True
        assert config.on_progress is None
        assert config.retry_policy.max_retries == 2

    @pytest.mark.parametrize("concurrency", [0, -1, 101])
    def test_concurrency_out_of_range_rejected(self, concurrency):
        with pytest.raises(ValidationError):
            BatchConfig(concurrency=concurrency)

    def test_accepts_progress_callback(self):
        def on_progress(completed: int, total: int) -> None:
            pass

        config = BatchConfig(on_progress=on_progress)
        assert config.on_progress is on_progress

    def test_rejects_non_callable_progress(self):
        with pytest.raises(ValidationError):
            BatchConfig(on_progress=42)

    def test_custom_retry_policy(self):
        policy = RetryPolicy(max_retries=7)
        assert BatchConfig(retry_policy=policy).retry_policy is policy


@pytest.fixture
def mixed_result():
    error = RuntimeError("boom")
    return BatchResult(
        (
            OperationOutcome(index=0, value="a"),
            OperationOutcome(index=1, error=error),
            OperationOutcome(index=2, value="c"),
        )
    )


class TestBatchResult:
    """Test result accessors."""

    def test_counts(self, mixed_result):
        assert len(mixed_result) == 3
        assert mixed_result.succeeded == 2
        assert mixed_result.failed == 1
        assert mixed_result.all_succeeded is False

    def test_failures_keep_original_index(self, mixed_result):
        [failure] = mixed_result.failures
        assert failure.index == 1
        assert isinstance(failure.error, RuntimeError)
        assert failure.ok is False

    def test_values_in_input_order(self, mixed_result):
        assert mixed_result.values() == ["a", None, "c"]

    def test_iteration_and_indexing(self, mixed_result):
        assert [outcome.index for outcome in mixed_result] == [0, 1, 2]
        assert mixed_result[2].value == "c"

    def test_empty_result(self):
        result = BatchResult()
        assert len(result) == 0
        assert result.all_succeeded is True
