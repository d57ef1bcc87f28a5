"""Unit test fixtures with mocked dependencies."""

import pytest

from infrastructure.settings import (
    get_auth_settings,
    get_database_settings,
    get_settings,
    get_users_settings,
)
from users.dependencies.authentication import get_jwt_validator

_CACHED_GETTERS = (
    get_settings,
    get_database_settings,
    get_auth_settings,
    get_users_settings,
    get_jwt_validator,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings for every test so environment changes are honored."""
    for getter in _CACHED_GETTERS:
        getter.cache_clear()
    yield
    for getter in _CACHED_GETTERS:
        getter.cache_clear()
