from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import UsersSettings, get_users_settings
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.authorization.protocols import AuthorizationProvider
from users.application.authorization import UserAuthorizationGate
from users.application.hooks import UserHooks
from users.application.observability import (
    AuthenticationProbe,
    DefaultAuthorizationGateProbe,
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from users.application.representation import UserRepresentationMapper
from users.application.services import UserService
from users.application.value_objects import Caller
from users.dependencies.authentication import (
    bearer_scheme,
    get_authentication_probe,
    get_jwt_validator,
)
from users.domain.value_objects import UserId
from users.infrastructure.avatar import GravatarAvatarResolver
from users.infrastructure.capability_provider import (
    RoleCapabilityAuthorizationProvider,
)
from users.infrastructure.links import BaseUrlLinkBuilder
from users.infrastructure.user_repository import UserRepository


async def get_current_caller(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    auth_probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> Caller:
    """Establish the caller from a JWT Bearer token.

    The user id claim must hold the caller's numeric user id.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or names no user id
    """
    if credentials is None:
        auth_probe.authentication_failed(reason="Missing authorization")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = await validator.validate_token(credentials.credentials)
        user_id = UserId.from_string(claims.sub)
    except (InvalidTokenError, ValueError) as e:
        auth_probe.authentication_failed(reason=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e) or "Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    username = claims.preferred_username or claims.sub
    auth_probe.caller_authenticated(user_id=user_id.value, username=username)
    return Caller(user_id=user_id, username=username)


def get_user_service_probe() -> UserServiceProbe:
    """Get UserServiceProbe instance.

    Returns:
        DefaultUserServiceProbe instance for observability
    """
    return DefaultUserServiceProbe()


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    settings: Annotated[UsersSettings, Depends(get_users_settings)],
) -> UserRepository:
    """Get UserRepository instance.

    Args:
        session: Async database session
        settings: User resource settings (default role)

    Returns:
        UserRepository instance
    """
    return UserRepository(session=session, default_role=settings.default_role)


def get_authorization_provider(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
) -> AuthorizationProvider:
    """Get the role-backed authorization provider."""
    return RoleCapabilityAuthorizationProvider(user_repository=user_repo)


def get_authorization_gate(
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
) -> UserAuthorizationGate:
    return UserAuthorizationGate(authz=authz, probe=DefaultAuthorizationGateProbe())


def get_user_hooks() -> UserHooks:
    """Get the extension hooks (identity/no-op by default).

    Override this dependency to install custom hooks.
    """
    return UserHooks()


def get_representation_mapper(
    settings: Annotated[UsersSettings, Depends(get_users_settings)],
    hooks: Annotated[UserHooks, Depends(get_user_hooks)],
) -> UserRepresentationMapper:
    """Get the representation mapper configured from settings."""
    return UserRepresentationMapper(
        avatar_resolver=GravatarAvatarResolver(
            base_url=settings.avatar_base_url,
            size=settings.avatar_size,
            default=settings.avatar_default,
        ),
        link_builder=BaseUrlLinkBuilder(settings.public_base_url),
        representation_hook=hooks.representation,
    )


def get_user_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    gate: Annotated[UserAuthorizationGate, Depends(get_authorization_gate)],
    mapper: Annotated[UserRepresentationMapper, Depends(get_representation_mapper)],
    hooks: Annotated[UserHooks, Depends(get_user_hooks)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    Args:
        user_repo: User repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        gate: Authorization gate for the user resource
        mapper: Representation mapper
        hooks: Extension hooks
        probe: User service probe for observability

    Returns:
        UserService instance
    """
    return UserService(
        user_repository=user_repo,
        session=session,
        gate=gate,
        mapper=mapper,
        hooks=hooks,
        probe=probe,
    )
