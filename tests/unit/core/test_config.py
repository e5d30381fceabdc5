"""Unit tests for src/core/config.py module."""

import pytest
from pydantic import ValidationError

from src.core.config import (
    DatabaseConfig,
    ErrorReportingConfig,
    PipelineConfig,
    Settings,
    get_settings,
)


@pytest.mark.unit
class TestSettingsDefaults:
    """Tests for default settings values."""

    def test_defaults(self) -> None:
        """Settings default to a bare service listening on port 3000."""
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.app_name == "microservice"
        assert settings.api_port == 3000
        assert settings.api_host == "0.0.0.0"  # noqa: S104
        assert settings.debug is False
        assert settings.database_config.database_url is None
        assert settings.error_reporting.destination is None
        assert settings.pipeline_config.acceptable[0] == "application/json"

    def test_formatter_console_in_development(self) -> None:
        """Development defaults to the console formatter."""
        settings = Settings(_env_file=None, environment="development")  # type: ignore[call-arg]

        assert settings.log_config.log_formatter_type == "console"

    def test_formatter_json_in_production(self) -> None:
        """Other environments default to the JSON formatter."""
        settings = Settings(_env_file=None, environment="production")  # type: ignore[call-arg]

        assert settings.log_config.log_formatter_type == "json"

    def test_formatter_json_on_container_platform(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Container platforms get JSON logs even in development."""
        monkeypatch.setenv("K_SERVICE", "svc")

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.log_config.log_formatter_type == "json"

    def test_explicit_formatter_is_kept(self) -> None:
        """An explicit formatter is never overridden."""
        settings = Settings(  # type: ignore[call-arg]
            _env_file=None,
            environment="production",
            log_config={"log_formatter_type": "console"},
        )

        assert settings.log_config.log_formatter_type == "console"


@pytest.mark.unit
class TestSettingsEnvironment:
    """Tests for environment variable overrides."""

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Flat and nested variables are read from the environment."""
        monkeypatch.setenv("APP_NAME", "orders")
        monkeypatch.setenv("API_PORT", "8080")
        monkeypatch.setenv("ERROR_REPORTING__LEVEL", "warn")
        monkeypatch.setenv("ERROR_REPORTING__DESTINATION", "/tmp/errors.log")
        monkeypatch.setenv("PIPELINE_CONFIG__MAX_PAGE_SIZE", "50")

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.app_name == "orders"
        assert settings.api_port == 8080
        assert settings.error_reporting.level == "WARNING"
        assert settings.error_reporting.destination == "/tmp/errors.log"
        assert settings.pipeline_config.max_page_size == 50

    def test_database_url_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The database URL is read from DATABASE_CONFIG__DATABASE_URL."""
        url = "postgresql+asyncpg://u:p@db:5432/orders"
        monkeypatch.setenv("DATABASE_CONFIG__DATABASE_URL", url)

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.database_config.database_url == url

    def test_get_settings_is_cached(self) -> None:
        """get_settings returns the same instance until the cache is cleared."""
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestNestedConfigs:
    """Tests for nested configuration models."""

    def test_database_url_requires_asyncpg(self) -> None:
        """Only the asyncpg driver is accepted."""
        with pytest.raises(ValidationError, match="postgresql\\+asyncpg"):
            DatabaseConfig(database_url="postgresql://u:p@db/app")

    def test_empty_database_url_means_no_database(self) -> None:
        """An empty URL disables the database."""
        assert DatabaseConfig(database_url="").database_url is None

    def test_error_reporting_level_is_normalized(self) -> None:
        """Lowercase names are accepted."""
        assert ErrorReportingConfig(level="error").level == "ERROR"

    def test_error_reporting_rejects_unknown_level(self) -> None:
        """Unknown level names fail validation."""
        with pytest.raises(ValidationError):
            ErrorReportingConfig(level="loud")

    def test_empty_destination_disables_reporting(self) -> None:
        """An empty destination means no error reporting sink."""
        assert ErrorReportingConfig(destination="").destination is None

    def test_pipeline_requires_an_acceptable_type(self) -> None:
        """At least one acceptable media type must be configured."""
        with pytest.raises(ValidationError):
            PipelineConfig(acceptable=[])
