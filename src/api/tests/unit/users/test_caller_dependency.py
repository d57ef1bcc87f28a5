"""Unit tests for the current-caller dependency."""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from shared_kernel.auth import InvalidTokenError, JWTValidator, TokenClaims
from users.application.observability import AuthenticationProbe
from users.application.value_objects import Caller
from users.dependencies.authentication import get_jwt_validator
from users.dependencies.user import get_current_caller, get_user_hooks
from users.domain.value_objects import UserId


@pytest.fixture
def mock_validator():
    validator = create_autospec(JWTValidator, instance=True)
    validator.validate_token = AsyncMock()
    return validator


@pytest.fixture
def mock_probe():
    return create_autospec(AuthenticationProbe, instance=True)


def bearer(token: str = "token") -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentCaller:
    @pytest.mark.asyncio
    async def test_valid_token_yields_caller(self, mock_validator, mock_probe):
        mock_validator.validate_token.return_value = TokenClaims(
            sub="7", preferred_username="seven"
        )

        caller = await get_current_caller(mock_validator, mock_probe, bearer())

        assert caller == Caller(user_id=UserId(value=7), username="seven")
        mock_probe.caller_authenticated.assert_called_once_with(
            user_id=7, username="seven"
        )

    @pytest.mark.asyncio
    async def test_username_falls_back_to_subject(self, mock_validator, mock_probe):
        mock_validator.validate_token.return_value = TokenClaims(
            sub="7", preferred_username=None
        )

        caller = await get_current_caller(mock_validator, mock_probe, bearer())

        assert caller.username == "7"

    @pytest.mark.asyncio
    async def test_missing_credentials_is_401(self, mock_validator, mock_probe):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_caller(mock_validator, mock_probe, None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
        mock_validator.validate_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, mock_validator, mock_probe):
        mock_validator.validate_token.side_effect = InvalidTokenError("Token has expired")

        with pytest.raises(HTTPException) as exc_info:
            await get_current_caller(mock_validator, mock_probe, bearer())

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"
        mock_probe.authentication_failed.assert_called_once_with(
            reason="Token has expired"
        )

    @pytest.mark.asyncio
    async def test_non_numeric_subject_is_401(self, mock_validator, mock_probe):
        mock_validator.validate_token.return_value = TokenClaims(
            sub="alice", preferred_username=None
        )

        with pytest.raises(HTTPException) as exc_info:
            await get_current_caller(mock_validator, mock_probe, bearer())

        assert exc_info.value.status_code == 401


class TestGetJwtValidator:
    def test_requires_signing_key(self, monkeypatch):
        monkeypatch.delenv("USERS_API_AUTH_SECRET_KEY", raising=False)

        with pytest.raises(RuntimeError, match="USERS_API_AUTH_SECRET_KEY"):
            get_jwt_validator()

    def test_builds_validator_from_settings(self, monkeypatch):
        monkeypatch.setenv("USERS_API_AUTH_SECRET_KEY", "signing-key")

        validator = get_jwt_validator()

        assert isinstance(validator, JWTValidator)
        assert get_jwt_validator() is validator


def test_default_hooks_are_installed():
    hooks = get_user_hooks()

    assert hooks.query is not None
    assert hooks.representation is not None


def test_route_dependency_graph_resolves():
    """The real service dependency can be built without a database."""
    from users.application.services import UserService
    from users.dependencies.user import (
        get_authorization_gate,
        get_authorization_provider,
        get_representation_mapper,
        get_user_repository,
        get_user_service,
    )
    from infrastructure.settings import UsersSettings

    session = MagicMock()
    settings = UsersSettings()
    hooks = get_user_hooks()
    repo = get_user_repository(session, settings)
    gate = get_authorization_gate(get_authorization_provider(repo))
    mapper = get_representation_mapper(settings, hooks)

    service = get_user_service(repo, session, gate, mapper, hooks, MagicMock())

    assert isinstance(service, UserService)
