"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import (
    AuthSettings,
    DatabaseSettings,
    UsersSettings,
    get_auth_settings,
    get_settings,
)


class TestDatabaseSettingsPoolConfiguration:
    """Tests for connection pool configuration."""

    def test_default_pool_settings(self):
        """Should have sensible pool defaults."""
        settings = DatabaseSettings()
        assert settings.pool_min_connections >= 1
        assert settings.pool_max_connections >= settings.pool_min_connections

    def test_pool_max_must_be_greater_than_or_equal_to_min(self):
        """Should validate max >= min."""
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

        assert "pool_max_connections" in str(exc_info.value)

    def test_pool_max_equal_to_min_is_valid(self):
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=5)
        assert settings.pool_max_connections == 5

    def test_pool_min_must_be_positive(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=0)

    def test_pool_max_respects_upper_limit(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_max_connections=101)


class TestEnvironment:
    """Tests for environment variable loading."""

    def test_database_settings_use_prefix(self, monkeypatch):
        monkeypatch.setenv("USERS_API_DB_HOST", "db.internal")
        monkeypatch.setenv("USERS_API_DB_PASSWORD", "s3cret")

        settings = DatabaseSettings()

        assert settings.host == "db.internal"
        assert settings.password.get_secret_value() == "s3cret"
        assert "s3cret" not in settings.connection_string

    def test_auth_settings_use_prefix(self, monkeypatch):
        monkeypatch.setenv("USERS_API_AUTH_SECRET_KEY", "signing-key")
        monkeypatch.setenv("USERS_API_AUTH_AUDIENCE", "users-api")

        settings = AuthSettings()

        assert settings.secret_key.get_secret_value() == "signing-key"
        assert settings.audience == "users-api"
        assert settings.issuer is None
        assert settings.algorithm == "HS256"

    def test_auth_secret_key_has_no_usable_default(self, monkeypatch):
        monkeypatch.delenv("USERS_API_AUTH_SECRET_KEY", raising=False)

        assert AuthSettings().secret_key.get_secret_value() == ""

    def test_users_settings_defaults(self):
        settings = UsersSettings()

        assert settings.default_role == "subscriber"
        assert settings.avatar_size == 96

    def test_users_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("USERS_API_PUBLIC_BASE_URL", "https://api.example.com")

        assert UsersSettings().public_base_url == "https://api.example.com"


def test_getters_are_cached():
    assert get_auth_settings() is get_auth_settings()
    assert get_settings().auth is get_auth_settings()
