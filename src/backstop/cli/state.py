"""CLI state container."""

import typing as t

from ..config.settings import Settings
from ..domain.batch import BatchConfig
from ..execution.batch.executor import BatchExecutor

ExecutorFactory = t.Callable[[BatchConfig], BatchExecutor]


class CLIState:
    """Application state container for CLI commands.

    Holds Settings and the factory used to build batch executors, so tests
    can inject a mocked executor.
    """

    def __init__(
        self,
        settings: Settings,
        executor_factory: ExecutorFactory | None = None,
    ):
        self.settings = settings
        self._executor_factory = executor_factory or BatchExecutor

    def create_executor(self, config: BatchConfig) -> BatchExecutor:
        return self._executor_factory(config)
