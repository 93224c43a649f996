"""Integration tests for retrying and batching real aiohttp requests."""

import aiohttp
import pytest
import pytest_asyncio
from aioresponses import CallbackResult, aioresponses

from backstop.domain.batch import BatchConfig
from backstop.domain.exceptions import BatchOperationError
from backstop.domain.retry import ErrorKind, RetryPolicy
from backstop.execution import BatchExecutor, ErrorClassifier, RetryHandler

URL = "https://api.example.com/generate"


def transient_then_success(fail_count: int, fail_status: int = 503):
    """Create callback that fails N times with ``fail_status``, then succeeds."""
    attempts = {"count": 0}

    async def callback(url, **kwargs):
        attempts["count"] += 1
        if attempts["count"] <= fail_count:
            return CallbackResult(status=fail_status, body=b"unavailable")
        return CallbackResult(status=200, payload={"text": "hello"})

    return callback, attempts


async def fetch_json(session: aiohttp.ClientSession, url: str = URL) -> dict:
    async with session.get(url) as response:
        response.raise_for_status()
        return await response.json()


@pytest_asyncio.fixture
async def aio_client():
    """Provide a real aiohttp ClientSession for integration testing."""
    session = aiohttp.ClientSession()
    yield session
    await session.close()


@pytest.fixture
def http_retry_handler(mock_logger, mock_emitter, fast_retry_policy):
    return RetryHandler(fast_retry_policy, mock_logger, mock_emitter)


class TestRetryHandlerWithAiohttp:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("fail_status", [429, 500, 503])
    async def test_transient_status_retried(
        self, aio_client, http_retry_handler, fail_status
    ):
        callback, attempts = transient_then_success(2, fail_status)

        with aioresponses() as mocked:
            mocked.get(URL, callback=callback, repeat=True)
            result = await http_retry_handler.execute_with_retry(
                lambda: fetch_json(aio_client)
            )

        assert result == {"text": "hello"}
        assert attempts["count"] == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fail_status", [400, 401, 404])
    async def test_client_status_not_retried(
        self, aio_client, http_retry_handler, fail_status
    ):
        callback, attempts = transient_then_success(5, fail_status)

        with aioresponses() as mocked:
            mocked.get(URL, callback=callback, repeat=True)
            with pytest.raises(aiohttp.ClientResponseError) as exc_info:
                await http_retry_handler.execute_with_retry(
                    lambda: fetch_json(aio_client)
                )

        assert exc_info.value.status == fail_status
        assert attempts["count"] == 1

    @pytest.mark.asyncio
    async def test_connection_error_retried(self, aio_client, http_retry_handler):
        with aioresponses() as mocked:
            mocked.get(URL, exception=aiohttp.ClientConnectionError("reset by peer"))
            mocked.get(URL, payload={"text": "hello"})

            result = await http_retry_handler.execute_with_retry(
                lambda: fetch_json(aio_client)
            )

        assert result == {"text": "hello"}

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, aio_client, http_retry_handler):
        callback, attempts = transient_then_success(10, 500)

        with aioresponses() as mocked:
            mocked.get(URL, callback=callback, repeat=True)
            with pytest.raises(aiohttp.ClientResponseError):
                await http_retry_handler.execute_with_retry(
                    lambda: fetch_json(aio_client)
                )

        assert attempts["count"] == 4

    @pytest.mark.asyncio
    async def test_response_error_classified_by_status(self, aio_client):
        with aioresponses() as mocked:
            mocked.get(URL, status=429)
            with pytest.raises(aiohttp.ClientResponseError) as exc_info:
                await fetch_json(aio_client)

        classification = ErrorClassifier().classify(exc_info.value)
        assert classification.kind == ErrorKind.RATE_LIMITED
        assert classification.retryable is True


class TestBatchWithAiohttp:
    @pytest.mark.asyncio
    async def test_batch_of_requests(self, aio_client, mock_logger, mock_emitter):
        urls = [f"{URL}/{i}" for i in range(5)]
        policy = RetryPolicy(max_retries=2, initial_delay=0.01, jitter=False)
        executor = BatchExecutor(
            BatchConfig(concurrency=2, retry_policy=policy), mock_logger, mock_emitter
        )

        with aioresponses() as mocked:
            mocked.get(urls[0], status=503)
            for index, url in enumerate(urls):
                mocked.get(url, payload={"index": index})

            results = await executor.run(
                [lambda url=url: fetch_json(aio_client, url) for url in urls]
            )

        assert [result["index"] for result in results] == list(range(5))

    @pytest.mark.asyncio
    async def test_batch_client_error_fails_fast(
        self, aio_client, mock_logger, mock_emitter
    ):
        urls = [f"{URL}/{i}" for i in range(4)]
        executor = BatchExecutor(BatchConfig(concurrency=2), mock_logger, mock_emitter)

        with aioresponses() as mocked:
            mocked.get(urls[0], payload={})
            mocked.get(urls[1], status=404)

            with pytest.raises(BatchOperationError) as exc_info:
                await executor.run(
                    [lambda url=url: fetch_json(aio_client, url) for url in urls]
                )

        assert exc_info.value.index == 1
        assert isinstance(exc_info.value.error, aiohttp.ClientResponseError)
