"""JWT validation for bearer-token authentication.

Validates tokens signed with the platform's shared signing key and extracts
the caller identity claims.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe


@dataclass(frozen=True)
class TokenClaims:
    """Validated JWT claims."""

    sub: str
    preferred_username: str | None


class InvalidTokenError(Exception):
    """Raised when JWT validation fails."""

    pass


class JWTValidator:
    """Validates JWT tokens against a shared signing key.

    Verifies signature, expiry and, when configured, issuer and audience.
    """

    def __init__(
        self,
        secret_key: str,
        probe: JWTValidatorProbe,
        algorithm: str = "HS256",
        issuer: str | None = None,
        audience: str | None = None,
        user_id_claim: str = "sub",
        username_claim: str = "preferred_username",
    ):
        """Initialize the JWT validator.

        Args:
            secret_key: Key the tokens are signed with.
            probe: Observability probe for logging events.
            algorithm: Signing algorithm (default: HS256).
            issuer: Expected issuer claim, or None to skip the check.
            audience: Expected audience claim, or None to skip the check.
            user_id_claim: JWT claim to use for user ID (default: sub).
            username_claim: JWT claim to use for username (default: preferred_username).
        """
        self._secret_key = secret_key
        self._probe = probe
        self._algorithm = algorithm
        self._issuer = issuer
        self._audience = audience
        self._user_id_claim = user_id_claim
        self._username_claim = username_claim

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate JWT and return claims.

        Args:
            token: The JWT token string.

        Returns:
            TokenClaims containing the validated claims.

        Raises:
            InvalidTokenError: If token is invalid, expired, or verification fails.
        """
        try:
            unverified_header = jwt.get_unverified_header(token)
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"Malformed token: {e}")
            raise InvalidTokenError(f"Invalid token format: {e}") from e

        if not unverified_header:
            self._probe.token_validation_failed(reason="Missing token header")
            raise InvalidTokenError("Invalid token: missing header")

        try:
            claims = jwt.decode(
                token=token,
                key=self._secret_key,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "verify_signature": True,
                    "verify_aud": self._audience is not None,
                    "verify_iss": self._issuer is not None,
                    "verify_exp": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            error_msg = str(e).lower()
            if "audience" in error_msg:
                self._probe.token_validation_failed(reason="Invalid audience")
                raise InvalidTokenError("Invalid audience claim") from e
            if "issuer" in error_msg:
                self._probe.token_validation_failed(reason="Invalid issuer")
                raise InvalidTokenError("Invalid issuer claim") from e
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            error_msg = str(e).lower()
            if "signature" in error_msg:
                self._probe.token_validation_failed(reason="Invalid signature")
                raise InvalidTokenError("Invalid token signature") from e
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        user_id = claims.get(self._user_id_claim)
        if user_id is None:
            self._probe.token_validation_failed(
                reason=f"Missing {self._user_id_claim} claim"
            )
            raise InvalidTokenError(f"Missing required claim: {self._user_id_claim}")

        username = claims.get(self._username_claim)

        self._probe.token_validated(user_id=str(user_id))

        return TokenClaims(
            sub=str(user_id),
            preferred_username=str(username) if username is not None else None,
        )
