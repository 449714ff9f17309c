"""Unit tests for Settings.

Tests cover:
- Defaults for stores, dispatcher and domain limits
- Field validators (database URL driver, MongoDB scheme, page cap, delays)
- Environment properties and JSON log selection
- get_settings caching

Architecture:
- Settings built with explicit keyword values (no .env dependency)
- monkeypatch for environment variable loading
"""

import pytest
from pydantic import ValidationError

from iam_admin.core.config import Settings, get_settings
from iam_admin.core.enums import Environment


@pytest.mark.unit
class TestSettingsDefaults:
    """Test default values."""

    def test_store_and_limit_defaults(self):
        """Test store backends and domain limits."""
        settings = Settings(_env_file=None)

        assert settings.write_store == "sqlalchemy"
        assert settings.read_store == "mongodb"
        assert settings.platform_tenant_id == "platform"
        assert settings.department_max_depth == 10
        assert settings.max_page_size == 100

    def test_dispatcher_defaults(self):
        """Test outbox and projection retry defaults."""
        settings = Settings(_env_file=None)

        assert settings.projection_max_attempts == 10
        assert settings.projection_backoff_base_seconds == 0.5
        assert settings.projection_backoff_max_seconds == 60.0
        assert settings.projection_park_limit == 100
        assert settings.outbox_batch_size == 100
        assert settings.dispatch_inline is False

    def test_values_load_from_environment(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("WRITE_STORE", "memory")
        monkeypatch.setenv("MAX_PAGE_SIZE", "50")

        settings = Settings(_env_file=None)

        assert settings.write_store == "memory"
        assert settings.max_page_size == 50


@pytest.mark.unit
class TestSettingsValidation:
    """Test field validators."""

    def test_database_url_requires_async_driver(self):
        """Test a URL without '+driver' is rejected."""
        with pytest.raises(ValidationError, match="async driver"):
            Settings(_env_file=None, database_url="postgresql://u:p@db/iam")

    def test_mongodb_url_requires_mongodb_scheme(self):
        """Test a non-mongodb scheme is rejected."""
        with pytest.raises(ValidationError, match="mongodb://"):
            Settings(_env_file=None, mongodb_url="http://localhost:27017")

    def test_mongodb_srv_scheme_accepted(self):
        """Test mongodb+srv URLs are accepted."""
        settings = Settings(_env_file=None, mongodb_url="mongodb+srv://cluster.example.com")

        assert settings.mongodb_url.startswith("mongodb+srv://")

    @pytest.mark.parametrize("size", [0, 101])
    def test_max_page_size_bounds(self, size):
        """Test the page cap must stay within 1-100."""
        with pytest.raises(ValidationError, match="between 1 and 100"):
            Settings(_env_file=None, max_page_size=size)

    @pytest.mark.parametrize(
        "field",
        [
            "store_timeout_seconds",
            "dispatch_timeout_seconds",
            "outbox_poll_interval_seconds",
            "projection_backoff_base_seconds",
            "projection_backoff_max_seconds",
        ],
    )
    def test_delays_must_be_positive(self, field):
        """Test timeouts and backoff delays reject zero."""
        with pytest.raises(ValidationError, match="greater than zero"):
            Settings(_env_file=None, **{field: 0})


@pytest.mark.unit
class TestSettingsProperties:
    """Test environment helpers."""

    @pytest.mark.parametrize(
        ("environment", "attribute"),
        [
            (Environment.DEVELOPMENT, "is_development"),
            (Environment.TESTING, "is_testing"),
            (Environment.CI, "is_ci"),
            (Environment.PRODUCTION, "is_production"),
        ],
    )
    def test_environment_flags(self, environment, attribute):
        """Test exactly one environment flag is set."""
        settings = Settings(_env_file=None, environment=environment)
        flags = ["is_development", "is_testing", "is_ci", "is_production"]

        assert [getattr(settings, name) for name in flags].count(True) == 1
        assert getattr(settings, attribute) is True

    def test_json_logs_outside_development(self):
        """Test JSON logs default on outside development."""
        assert Settings(_env_file=None, environment=Environment.PRODUCTION).use_json_logs
        assert not Settings(
            _env_file=None, environment=Environment.DEVELOPMENT
        ).use_json_logs

    def test_log_json_override(self):
        """Test an explicit log_json wins."""
        settings = Settings(
            _env_file=None, environment=Environment.DEVELOPMENT, log_json=True
        )

        assert settings.use_json_logs is True


@pytest.mark.unit
class TestGetSettings:
    """Test cached settings accessor."""

    def test_get_settings_is_cached(self):
        """Test repeated calls return the same instance."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
