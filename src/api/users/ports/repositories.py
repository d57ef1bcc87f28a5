"""Repository protocols (ports) for the Users bounded context.

Repository protocols define the interface for persisting and retrieving
User aggregates. The application layer depends only on these protocols.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from users.domain.aggregates import User
from users.domain.value_objects import UserId

DEFAULT_PAGE_SIZE = 10

ORDERBY_ALIASES: Mapping[str, str] = {
    "id": "id",
    "ID": "id",
    "username": "username",
    "login": "username",
    "user_login": "username",
    "name": "name",
    "display_name": "name",
    "slug": "slug",
    "nicename": "slug",
    "user_nicename": "slug",
    "email": "email",
    "user_email": "email",
    "url": "url",
    "user_url": "url",
    "registered": "registered",
    "user_registered": "registered",
}


def _as_ids(value: Any) -> tuple[int, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        value = value.split(",")
    elif not isinstance(value, (list, tuple, set, frozenset)):
        value = [value]
    return tuple(abs(int(str(item).strip())) for item in value if str(item).strip())


@dataclass(frozen=True)
class UserQuery:
    """Query arguments for searching users.

    Attributes:
        orderby: Field to order by (one of ORDERBY_ALIASES values)
        order: "ASC" or "DESC"
        offset: Number of matching records to skip
        number: Maximum number of records to return
        search: Substring matched against username, email, url, name and slug
        role: Only users holding this role
        include: Only users with these ids
        exclude: Never users with these ids
    """

    orderby: str = "username"
    order: str = "ASC"
    offset: int = 0
    number: int = DEFAULT_PAGE_SIZE
    search: str | None = None
    role: str | None = None
    include: tuple[int, ...] = ()
    exclude: tuple[int, ...] = ()

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> UserQuery:
        """Build a query from a loosely-typed argument mapping.

        Unrecognized keys are ignored. Unknown orderby values fall back to
        ordering by username; anything other than "DESC" orders ascending.

        Raises:
            ValueError: If a numeric argument is not a number
        """
        orderby = ORDERBY_ALIASES.get(str(args.get("orderby", "username")), "username")
        order = "DESC" if str(args.get("order", "ASC")).upper() == "DESC" else "ASC"
        search = args.get("search") or None
        role = args.get("role") or None
        return cls(
            orderby=orderby,
            order=order,
            offset=abs(int(args.get("offset") or 0)),
            number=abs(int(args.get("number") or DEFAULT_PAGE_SIZE)),
            search=str(search) if search is not None else None,
            role=str(role) if role is not None else None,
            include=_as_ids(args.get("include")),
            exclude=_as_ids(args.get("exclude")),
        )


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence.

    Implementations own atomicity: uniqueness of usernames and email
    addresses, identity assignment and serialization of concurrent writes.
    """

    async def search(self, query: UserQuery) -> list[User]:
        """Find users matching a query, ordered and paginated.

        Args:
            query: Filter, ordering and pagination arguments

        Returns:
            Matching users in query order; empty when nothing matches
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def insert(self, user: User) -> UserId:
        """Persist a new user.

        Args:
            user: The unpersisted User aggregate (with a plaintext password)

        Returns:
            The identity assigned to the stored user

        Raises:
            EmptyUsernameError: If the username is empty
            ValueTooLongError: If a field exceeds its stored length
            DuplicateUsernameError: If the username is already registered
            DuplicateEmailError: If the email address is already registered
        """
        ...

    async def update(self, user: User) -> UserId:
        """Persist changes to an existing user.

        A ``None`` password leaves the stored secret untouched.

        Args:
            user: The persisted User aggregate carrying new field values

        Returns:
            The identity of the updated user

        Raises:
            UserNotFoundError: If the user no longer exists
            ValueTooLongError: If a field exceeds its stored length
            DuplicateUsernameError: If the username belongs to another user
            DuplicateEmailError: If the email address belongs to another user
        """
        ...

    async def delete(self, user_id: UserId, reassign_to: UserId | None = None) -> bool:
        """Delete a user.

        Args:
            user_id: The user to delete
            reassign_to: User that inherits the deleted user's content, if any

        Returns:
            True if the user was deleted, False otherwise
        """
        ...
