"""Tests for NullRetryHandler."""

import asyncio

import pytest

from backstop.execution import NullRetryHandler
from backstop.execution.retry.base import BaseRetryHandler


@pytest.fixture
def null_handler():
    return NullRetryHandler()


def test_implements_base(null_handler):
    assert isinstance(null_handler, BaseRetryHandler)


@pytest.mark.asyncio
async def test_runs_operation_once(null_handler):
    calls = 0

    async def operation():
        nonlocal calls
        calls += 1
        raise asyncio.TimeoutError()

    with pytest.raises(asyncio.TimeoutError):
        await null_handler.execute_with_retry(operation, max_retries=5)

    assert calls == 1


@pytest.mark.asyncio
async def test_returns_result(null_handler):
    async def operation():
        return 42

    assert await null_handler.execute_with_retry(operation) == 42
