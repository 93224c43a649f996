from dataclasses import dataclass, field

from .config.settings import Settings
from .domain.batch import BatchConfig
from .events import EventEmitter
from .events.base import BaseEmitter
from .execution.batch.executor import BatchExecutor
from .execution.retry.handler import RetryHandler
from .infrastructure.logging import get_logger, setup_logging


@dataclass(frozen=True)
class App:
    """Application wiring container.

    Holds settings and a shared event emitter, and builds executors from
    them. Callers keep an explicit ``App`` handle instead of relying on a
    module-level singleton.
    """

    settings: Settings
    emitter: BaseEmitter = field(default_factory=EventEmitter)

    def retry_handler(self) -> RetryHandler:
        """Build a retry handler using the settings' retry policy."""
        return RetryHandler(
            self.settings.retry_policy(),
            logger=get_logger("backstop.retry"),
            emitter=self.emitter,
        )

    def batch_executor(self, config: BatchConfig | None = None) -> BatchExecutor:
        """Build a batch executor, defaulting to the settings' batch config."""
        return BatchExecutor(
            config or self.settings.batch_config(),
            logger=get_logger("backstop.batch"),
            emitter=self.emitter,
        )


def create_app(settings: Settings | None = None) -> App:
    """Create an `App` with provided settings or defaults and configure logging.

    Invalid retry or batch settings fail here rather than on first use.
    """
    settings = settings or Settings()
    setup_logging(settings)
    settings.retry_policy()
    settings.batch_config()
    return App(settings=settings, emitter=EventEmitter(get_logger("backstop.events")))
