"""Application-layer value objects for the Users bounded context.

These represent request-scoped concerns: who is calling, what they asked to
change, and what a successful create hands back to the routing layer.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from users.domain.value_objects import UserId
from users.ports.exceptions import UserValidationError


@dataclass(frozen=True)
class Caller:
    """The authenticated caller of a user resource operation.

    Passed explicitly into every operation; nothing reads the caller from
    process-wide state.
    """

    user_id: UserId
    username: str = ""


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class MutationPayload:
    """Sparse set of field changes used for both create and update.

    Every field is an optional slot: ``None`` means "not supplied". A nonzero
    ``id`` marks the payload as an update; a missing or zero ``id`` marks it
    as a create. Roles and capabilities have no slot and can never be set
    through a payload.
    """

    id: int | None = None
    username: str | None = None
    password: str | None = dataclasses.field(default=None, repr=False)
    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    nickname: str | None = None
    slug: str | None = None
    url: str | None = None
    description: str | None = None
    email: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MutationPayload:
        """Build a payload from a wire-format mapping.

        Wire keys follow the API representation (``ID``, ``URL``); unknown
        keys are ignored.

        Raises:
            UserValidationError: If ``ID`` is present but not an integer
        """
        raw_id = data.get("ID", data.get("id"))
        user_id: int | None = None
        if raw_id not in (None, ""):
            try:
                user_id = int(str(raw_id).strip())
            except ValueError as e:
                raise UserValidationError(
                    "Invalid user ID.", code="user_invalid_id", field="ID"
                ) from e

        return cls(
            id=user_id,
            username=_text(data.get("username")),
            password=_text(data.get("password")),
            name=_text(data.get("name")),
            first_name=_text(data.get("first_name")),
            last_name=_text(data.get("last_name")),
            nickname=_text(data.get("nickname")),
            slug=_text(data.get("slug")),
            url=_text(data.get("URL", data.get("url"))),
            description=_text(data.get("description")),
            email=_text(data.get("email")),
        )

    @property
    def is_update(self) -> bool:
        """Whether this payload targets an existing user."""
        return bool(self.id)

    def with_id(self, user_id: UserId) -> MutationPayload:
        """Return a copy of this payload forced onto an existing user."""
        return dataclasses.replace(self, id=user_id.value)


@dataclass(frozen=True)
class CreatedUser:
    """Result of a successful create.

    Attributes:
        user_id: Identity assigned to the new user
        representation: The new user's external representation
        location: Absolute URL of the new resource
    """

    user_id: UserId
    representation: dict[str, Any]
    location: str
