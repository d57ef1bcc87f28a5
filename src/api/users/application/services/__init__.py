"""Application services for the Users bounded context."""

from users.application.services.user_service import UserService

__all__ = [
    "UserService",
]
