"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        USERS_API_DB_HOST: Database host (default: localhost)
        USERS_API_DB_PORT: Database port (default: 5432)
        USERS_API_DB_DATABASE: Database name (default: users_api)
        USERS_API_DB_USERNAME: Database user (default: users_api)
        USERS_API_DB_PASSWORD: Database password (required in production)
        USERS_API_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        USERS_API_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="USERS_API_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="users_api", description="Database name")
    username: str = Field(default="users_api", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Bearer-token authentication settings.

    Environment variables:
        USERS_API_AUTH_SECRET_KEY: Key tokens are signed with (required)
        USERS_API_AUTH_ALGORITHM: Signing algorithm (default: HS256)
        USERS_API_AUTH_ISSUER: Expected issuer claim (default: unchecked)
        USERS_API_AUTH_AUDIENCE: Expected audience claim (default: unchecked)
        USERS_API_AUTH_USER_ID_CLAIM: Claim holding the numeric user id (default: sub)
        USERS_API_AUTH_USERNAME_CLAIM: Claim holding the username (default: preferred_username)
    """

    model_config = SettingsConfigDict(
        env_prefix="USERS_API_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret_key: SecretStr = Field(
        default=SecretStr(""),
        description="Token signing key; no tokens are accepted until set",
    )
    algorithm: str = Field(default="HS256", description="Token signing algorithm")
    issuer: str | None = Field(default=None, description="Expected issuer claim")
    audience: str | None = Field(default=None, description="Expected audience claim")
    user_id_claim: str = Field(default="sub", description="User ID claim")
    username_claim: str = Field(
        default="preferred_username", description="Username claim"
    )


class UsersSettings(BaseSettings):
    """Settings for the user resource.

    Environment variables:
        USERS_API_PUBLIC_BASE_URL: Public base URL used in links and Location headers
        USERS_API_DEFAULT_ROLE: Role given to users created without one (default: subscriber)
        USERS_API_AVATAR_BASE_URL: Avatar service base URL
        USERS_API_AVATAR_SIZE: Avatar size in pixels (default: 96)
        USERS_API_AVATAR_DEFAULT: Avatar fallback image (default: mm)
    """

    model_config = SettingsConfigDict(
        env_prefix="USERS_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    public_base_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL of the API",
    )
    default_role: str = Field(default="subscriber", description="Default role")
    avatar_base_url: str = Field(
        default="https://secure.gravatar.com/avatar",
        description="Avatar service base URL",
    )
    avatar_size: int = Field(default=96, ge=1, le=2048, description="Avatar size")
    avatar_default: str = Field(default="mm", description="Avatar fallback image")


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Users API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get authentication settings."""
        return get_auth_settings()

    @property
    def users(self) -> UsersSettings:
        """Get user resource settings."""
        return get_users_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings."""
    return AuthSettings()


@lru_cache
def get_users_settings() -> UsersSettings:
    """Get cached user resource settings."""
    return UsersSettings()
