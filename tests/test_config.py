"""
Tests for environment-driven configuration.
"""

import pytest

from dropdetective.config import (
    AnalysisConfig,
    DatabaseConfig,
    SheetsConfig,
    get_env_int,
    get_settings,
    reset_settings,
    settings,
)


class TestSettingsFromEnvironment:
    """Values come from environment variables with defaults."""

    def setup_method(self):
        reset_settings()

    def teardown_method(self):
        reset_settings()

    def test_defaults(self, monkeypatch):
        for key in ("SHEETS_RANGE", "ANALYSIS_BATCH_SIZE", "ANALYSIS_SERVICE_URL", "DATABASE_PASSWORD"):
            monkeypatch.delenv(key, raising=False)

        current = get_settings()

        assert current.sheets.value_range == "Sheet1!A:C"
        assert current.analysis.batch_size == 5
        assert current.analysis.service_url == ""
        assert current.database.enabled is False

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("ANALYSIS_BATCH_SIZE", "3")
        monkeypatch.setenv("SHEETS_NAME_COLUMN", "2")
        monkeypatch.setenv("SHEETS_LINK_COLUMN", "4")
        monkeypatch.setenv("DATABASE_PASSWORD", "secret")

        current = get_settings()

        assert current.analysis.batch_size == 3
        assert current.sheets.name_column == 2
        assert current.sheets.link_column == 4
        assert current.database.enabled is True
        assert current.database.connection_dict["password"] == "secret"

    def test_singleton_and_proxy(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert get_settings() is get_settings()
        assert settings.environment == "production"
        assert settings.is_production()

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("ANALYSIS_BATCH_SIZE", "five")
        with pytest.raises(ValueError, match="ANALYSIS_BATCH_SIZE"):
            get_env_int("ANALYSIS_BATCH_SIZE", 5)


class TestValidation:
    """__post_init__ checks."""

    def test_batch_size_positive(self):
        with pytest.raises(ValueError):
            AnalysisConfig(batch_size=0)

    def test_negative_columns(self):
        with pytest.raises(ValueError):
            SheetsConfig(name_column=-1, link_column=1)

    def test_pool_sizes(self):
        with pytest.raises(ValueError):
            DatabaseConfig(pool_min_size=10, pool_max_size=2)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
