"""Shared fixtures for CLI tests."""

import os

import pytest

from backstop.cli.app import create_cli_app
from backstop.cli.state import CLIState
from backstop.domain.batch import BatchResult, OperationOutcome
from backstop.execution import BatchExecutor


@pytest.fixture
def cli_app(test_settings):
    """Provide CLI app with test settings injected."""
    return create_cli_app(settings=test_settings)


@pytest.fixture
def default_app(monkeypatch):
    """Provide CLI app with default settings and a clean environment."""
    for name in list(os.environ):
        if name.startswith("BACKSTOP_"):
            monkeypatch.delenv(name)
    return create_cli_app()


@pytest.fixture
def mock_executor(mocker):
    """Provide fully mocked BatchExecutor with spec for type safety."""
    mock = mocker.AsyncMock(spec=BatchExecutor)
    mock.run.return_value = [0, 1, 2]
    mock.run_settled.return_value = BatchResult(
        (
            OperationOutcome(index=0, value=0),
            OperationOutcome(index=1, error=RuntimeError("Service unavailable")),
        )
    )
    return mock


@pytest.fixture
def executor_factory(mocker, mock_executor):
    """Provide executor factory returning the mocked executor."""
    return mocker.Mock(return_value=mock_executor)


@pytest.fixture
def app_with_mock_executor(test_settings, executor_factory):
    """Provide CLI app whose commands build the mocked executor."""
    state = CLIState(test_settings, executor_factory=executor_factory)
    return create_cli_app(state=state)
