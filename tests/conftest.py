"""Pytest configuration and fixtures for backstop tests."""

import typing as t

import loguru
import pytest
from blockbuster import BlockBuster, blockbuster_ctx
from typer.testing import CliRunner

from backstop.app import create_app
from backstop.config.settings import Environment, LogLevel, Settings
from backstop.domain.retry import RetryPolicy
from backstop.events import BaseEmitter, EventEmitter
from backstop.infrastructure.logging import reset_logging


@pytest.fixture(autouse=True)
def blockbuster() -> t.Iterator[BlockBuster]:
    """Detect blocking calls in async event loop during tests.

    This fixture automatically activates Blockbuster for all tests,
    which will raise a BlockingError if any blocking I/O operations
    are called from backstop code within an async context.
    """
    with blockbuster_ctx(
        scanned_modules=["backstop"],
    ) as bb:
        # Third party modules use these functions, so we deactivate them
        # for now
        bb.functions["os.path.abspath"].deactivate()

        yield bb


@pytest.fixture
def test_settings():
    """Provide test-specific settings."""
    return Settings(
        environment=Environment.TESTING,
        log_level=LogLevel.CRITICAL,  # Minimal logging during tests
    )


@pytest.fixture
def test_app(test_settings):
    """Provide a test app with clean logging state."""
    reset_logging()
    app = create_app(settings=test_settings)
    yield app
    reset_logging()


@pytest.fixture
def mock_logger(mocker):
    """Provide a mock logger for testing that captures log calls."""
    logger = mocker.Mock(spec=loguru.logger)
    return logger


@pytest.fixture
def mock_emitter(mocker):
    """Provide a mock event emitter for testing event emission."""
    emitter = mocker.Mock(spec=BaseEmitter)
    return emitter


@pytest.fixture
def real_emitter(mock_logger):
    """Provide a real EventEmitter for testing actual event emission.

    Use this when handlers need to receive and process events.
    For simple tests that only verify emit() was called, use mock_emitter.
    """
    return EventEmitter(mock_logger)


@pytest.fixture
def fast_retry_policy():
    """Provide a RetryPolicy with fast, deterministic retries for testing."""
    return RetryPolicy(
        max_retries=3,
        initial_delay=0.01,  # 10ms base delay
        max_delay=0.1,  # 100ms max delay
        jitter=False,  # Deterministic timing for tests
    )


@pytest.fixture(autouse=True)
def clean_logging_state():
    """Automatically reset logging before each test for isolation."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def cli_runner():
    """Provide Typer CLI test runner."""
    return CliRunner()


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    """Provide a manually advanced clock for wall-clock budget tests."""
    return FakeClock()
