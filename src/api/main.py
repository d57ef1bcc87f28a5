"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from infrastructure.database.dependencies import close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from users.dependencies.authentication import get_jwt_validator
from users.presentation import register_exception_handlers
from users.presentation import router as users_router


@asynccontextmanager
async def users_api_lifespan(app: FastAPI):
    """Application lifespan context.

    Startup fails unless a token signing key is configured. The database
    engine is created lazily on first request and disposed on shutdown.
    """
    get_jwt_validator()

    yield

    await close_database_connections()


configure_logging(debug=get_settings().debug)

app = FastAPI(
    title="Users API",
    description="User resource API with role and capability based authorization",
    version=__version__,
    lifespan=users_api_lifespan,
)

register_exception_handlers(app)

app.include_router(users_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
