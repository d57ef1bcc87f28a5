from functools import lru_cache

from fastapi.security import HTTPBearer

from infrastructure.settings import get_auth_settings
from shared_kernel.auth import JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe
from users.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)

# auto_error is off so that missing credentials are reported through the probe
bearer_scheme = HTTPBearer(auto_error=False, description="Signed bearer token")


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator.

    Returns:
        JWTValidator instance configured from authentication settings.

    Raises:
        RuntimeError: If no signing key is configured
    """
    settings = get_auth_settings()
    if not settings.secret_key.get_secret_value():
        raise RuntimeError("USERS_API_AUTH_SECRET_KEY must be set")
    return JWTValidator(
        secret_key=settings.secret_key.get_secret_value(),
        probe=DefaultJWTValidatorProbe(),
        algorithm=settings.algorithm,
        issuer=settings.issuer,
        audience=settings.audience,
        user_id_claim=settings.user_id_claim,
        username_claim=settings.username_claim,
    )


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance.

    Returns:
        DefaultAuthenticationProbe instance for observability
    """
    return DefaultAuthenticationProbe()
