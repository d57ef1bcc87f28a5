"""Rendering of user resource errors as HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from users.ports.exceptions import UserAPIError


async def user_api_error_handler(request: Request, exc: UserAPIError) -> JSONResponse:
    """Render a UserAPIError with its own status code and error body."""
    return JSONResponse(status_code=exc.status_code, content=exc.as_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UserAPIError, user_api_error_handler)
