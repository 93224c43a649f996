"""Tests for Settings configuration helpers."""

import pytest

from backstop.config.settings import (
    Environment,
    LogLevel,
    Settings,
    build_settings,
    settings_from_env,
)


@pytest.fixture
def default_settings():
    """Provide default Settings for comparison."""
    return Settings()


class TestBuildSettings:
    """Test our build_settings helper logic."""

    def test_filters_none_values(self, default_settings):
        """build_settings ignores None overrides."""
        settings = build_settings(
            max_retries=None,
            log_level=LogLevel.DEBUG,
        )

        assert settings.max_retries == default_settings.max_retries
        assert settings.log_level == LogLevel.DEBUG

    def test_applies_all_overrides(self):
        """build_settings applies all non-None overrides."""
        settings = build_settings(
            max_retries=7,
            log_level=LogLevel.ERROR,
            initial_delay=0.25,
        )

        assert settings.max_retries == 7
        assert settings.log_level == LogLevel.ERROR
        assert settings.initial_delay == 0.25

    def test_overrides_apply_on_top_of_base(self):
        base = Settings(batch_concurrency=8)
        settings = build_settings(base, max_retries=1)

        assert settings.batch_concurrency == 8
        assert settings.max_retries == 1


class TestSettingsCoercion:
    """Test that enum fields accept plain strings."""

    def test_log_level_string_is_coerced(self):
        settings = Settings(log_level="critical")
        assert settings.log_level is LogLevel.CRITICAL

    def test_environment_string_is_coerced(self):
        settings = Settings(environment="testing")
        assert settings.environment is Environment.TESTING

    def test_invalid_log_level_raises(self):
        with pytest.raises(ValueError):
            Settings(log_level="LOUD")


class TestSettingsFromEnv:
    """Test reading BACKSTOP_* environment variables."""

    def test_empty_environment_gives_defaults(self, default_settings):
        assert settings_from_env({}) == default_settings

    def test_reads_typed_values(self):
        settings = settings_from_env(
            {
                "BACKSTOP_MAX_RETRIES": "5",
                "BACKSTOP_INITIAL_DELAY": "0.5",
                "BACKSTOP_RETRY_ON_RATE_LIMIT": "false",
                "BACKSTOP_LOG_LEVEL": "debug",
                "BACKSTOP_ENVIRONMENT": "development",
            }
        )

        assert settings.max_retries == 5
        assert settings.initial_delay == 0.5
        assert settings.retry_on_rate_limit is False
        assert settings.log_level is LogLevel.DEBUG
        assert settings.environment is Environment.DEVELOPMENT

    def test_ignores_unrelated_variables(self, default_settings):
        assert settings_from_env({"MAX_RETRIES": "9"}) == default_settings

    @pytest.mark.parametrize(
        "name, value",
        [
            ("BACKSTOP_MAX_RETRIES", "many"),
            ("BACKSTOP_RETRY_ON_SERVER_ERROR", "sometimes"),
        ],
    )
    def test_invalid_values_raise(self, name, value):
        with pytest.raises(ValueError, match=name):
            settings_from_env({name: value})


class TestSettingsBuilders:
    """Test conversion into validated configuration objects."""

    def test_retry_policy_mirrors_settings(self):
        settings = Settings(
            max_retries=4,
            initial_delay=0.2,
            max_delay=3.0,
            backoff_multiplier=3.0,
            max_elapsed=60.0,
            retry_on_rate_limit=False,
        )

        policy = settings.retry_policy()

        assert policy.max_retries == 4
        assert policy.initial_delay == 0.2
        assert policy.max_delay == 3.0
        assert policy.backoff_multiplier == 3.0
        assert policy.max_elapsed == 60.0
        assert policy.retry_on_rate_limit is False
        assert policy.retry_on_server_error is True

    def test_batch_config_uses_batch_retry_budget(self):
        settings = Settings(max_retries=5, batch_max_retries=1, batch_concurrency=4)

        config = settings.batch_config()

        assert config.concurrency == 4
        assert config.retry is True
        assert config.retry_policy.max_retries == 1
        assert config.retry_policy.initial_delay == settings.initial_delay

    def test_batch_config_without_retry(self, default_settings):
        assert default_settings.batch_config(retry=False).retry is False

    def test_to_dict_uses_plain_values(self, default_settings):
        data = default_settings.to_dict()

        assert data["environment"] == "production"
        assert data["log_level"] == "INFO"
        assert data["max_retries"] == 3
