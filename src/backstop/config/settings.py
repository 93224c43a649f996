"""Application settings.

``Settings`` keeps a stable shape that core code depends on while the
app/CLI layer decides how values are populated (explicit overrides,
environment variables).
"""

import os
import typing as t
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum

from ..domain.batch import BatchConfig
from ..domain.retry import RetryPolicy

ENV_PREFIX = "BACKSTOP_"


class Environment(Enum):
    """Runtime environment for the application."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Log levels understood by loguru."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class Settings:
    """Settings container used to bootstrap the app.

    Retry and batch values are plain numbers here; ``retry_policy()`` and
    ``batch_config()`` turn them into validated configuration objects, so
    invalid values surface when the app is wired rather than mid-retry.
    """

    environment: Environment = Environment.PRODUCTION
    log_level: LogLevel = LogLevel.INFO
    max_retries: int = 3
    initial_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    backoff_multiplier: float = 2.0
    max_elapsed: float = 300.0  # wall-clock ceiling per call, seconds
    retry_on_rate_limit: bool = True
    retry_on_server_error: bool = True
    batch_concurrency: int = 3
    batch_max_retries: int = 2

    def __post_init__(self) -> None:
        # Accept plain strings for enum fields (env vars, tests)
        if not isinstance(self.log_level, LogLevel):
            object.__setattr__(self, "log_level", LogLevel(str(self.log_level).upper()))
        if not isinstance(self.environment, Environment):
            object.__setattr__(
                self, "environment", Environment(str(self.environment).lower())
            )

    def retry_policy(self) -> RetryPolicy:
        """Build the default retry policy for single operations."""
        return RetryPolicy(
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            backoff_multiplier=self.backoff_multiplier,
            max_elapsed=self.max_elapsed,
            retry_on_rate_limit=self.retry_on_rate_limit,
            retry_on_server_error=self.retry_on_server_error,
        )

    def batch_config(self, retry: bool = True) -> BatchConfig:
        """Build the default batch configuration.

        Batch units get a reduced retry budget to bound total batch latency.
        """
        policy = self.retry_policy().model_copy(
            update={"max_retries": self.batch_max_retries}
        )
        return BatchConfig(
            concurrency=self.batch_concurrency,
            retry=retry,
            retry_policy=policy,
        )

    def to_dict(self) -> dict[str, t.Any]:
        data = asdict(self)
        data["environment"] = self.environment.value
        data["log_level"] = self.log_level.value
        return data


def build_settings(base: Settings | None = None, **overrides: t.Any) -> Settings:
    """Return settings with the non-None overrides applied.

    Lets CLI options pass ``None`` for "not given" without clobbering defaults.
    """
    base = base or Settings()
    applied = {key: value for key, value in overrides.items() if value is not None}
    return replace(base, **applied)


def settings_from_env(environ: t.Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``BACKSTOP_*`` environment variables.

    Unset variables keep their defaults. Values are converted using the
    type of the field's default.

    Raises:
        ValueError: If a variable cannot be converted
    """
    environ = os.environ if environ is None else environ
    defaults = Settings()
    overrides: dict[str, t.Any] = {}

    for field in fields(Settings):
        raw = environ.get(f"{ENV_PREFIX}{field.name.upper()}")
        if raw is None:
            continue
        default = getattr(defaults, field.name)
        if isinstance(default, bool):
            overrides[field.name] = _parse_bool(field.name, raw)
        elif isinstance(default, Enum):
            overrides[field.name] = raw
        else:
            try:
                overrides[field.name] = type(default)(raw)
            except ValueError as exc:
                msg = f"Invalid value for {ENV_PREFIX}{field.name.upper()}: {raw!r}"
                raise ValueError(msg) from exc

    return build_settings(defaults, **overrides)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean for {ENV_PREFIX}{name.upper()}: {raw!r}")
