"""Logging configuration built on loguru.

Loguru exposes a single global logger. Components receive it through
dependency injection (``logger: "loguru.Logger" = get_logger(__name__)``)
so tests can substitute a mock.
"""

import sys
import typing as t

from loguru import logger

from ..config.settings import Environment, LogLevel, Settings

if t.TYPE_CHECKING:
    import loguru

_DEVELOPMENT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_configured = False


def configure_logger(
    level: LogLevel = LogLevel.INFO,
    environment: Environment = Environment.DEVELOPMENT,
) -> None:
    """Replace loguru's default sink with one suited to the environment.

    Development gets a colourised human format, production emits JSON lines.
    Testing behaves like development but never colourises.
    """
    global _configured

    logger.remove()
    logger.configure(extra={"name": "backstop"})

    if environment == Environment.PRODUCTION:
        logger.add(sys.stderr, level=level.value, serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=level.value,
            format=_DEVELOPMENT_FORMAT,
            colorize=environment == Environment.DEVELOPMENT,
        )

    _configured = True


def setup_logging(settings: Settings) -> None:
    """Configure logging from application settings."""
    configure_logger(level=settings.log_level, environment=settings.environment)


def get_logger(name: str) -> "loguru.Logger":
    """Return the shared logger bound to a module name.

    Configures logging with defaults the first time it is called.
    """
    if not _configured:
        configure_logger()
    return logger.bind(name=name)


def is_configured() -> bool:
    return _configured


def reset_logging() -> None:
    """Remove all sinks so the next get_logger() call reconfigures."""
    global _configured

    logger.remove()
    _configured = False
