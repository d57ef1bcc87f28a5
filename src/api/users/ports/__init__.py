"""Ports for the Users bounded context.

Ports define the interfaces the application layer depends on; adapters in
the infrastructure layer implement them.
"""

from users.ports.repositories import DEFAULT_PAGE_SIZE, IUserRepository, UserQuery
from users.ports.services import AvatarResolver, LinkBuilder

__all__ = [
    "AvatarResolver",
    "DEFAULT_PAGE_SIZE",
    "IUserRepository",
    "LinkBuilder",
    "UserQuery",
]
