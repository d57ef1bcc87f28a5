"""SQLAlchemy ORM models for the Users bounded context.

These models map to database tables and are used by repository implementations.
"""

from users.infrastructure.models.user import UserModel

__all__ = [
    "UserModel",
]
