"""User aggregate for the Users context."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from users.domain.roles import derive_capabilities
from users.domain.value_objects import UserId


@dataclass(frozen=True)
class User:
    """User aggregate representing an account on the platform.

    Business rules:
    - ``id`` is assigned by persistence and never changes afterwards
    - ``username`` is required at creation and unique across all users
    - ``password`` is write-only: it only carries a new secret that is about
      to be stored, and is never populated when a record is loaded
    - effective capabilities are derived from ``roles`` and
      ``direct_capabilities``; they cannot be assigned
    """

    id: UserId = field(default_factory=UserId.unsaved)
    username: str = ""
    password: str | None = field(default=None, repr=False)
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    nickname: str = ""
    slug: str = ""
    url: str = ""
    description: str = ""
    email: str = ""
    registered: datetime | None = None
    roles: frozenset[str] = frozenset()
    direct_capabilities: Mapping[str, bool] = field(default_factory=dict)

    @classmethod
    def new(cls) -> User:
        """Create a fresh, unpersisted user record."""
        return cls()

    @property
    def is_persisted(self) -> bool:
        """Whether this record has been stored."""
        return self.id.is_persisted

    @property
    def capabilities(self) -> dict[str, bool]:
        """Effective capabilities derived from roles and direct overrides."""
        return derive_capabilities(self.roles, self.direct_capabilities)

    def has_capability(self, capability: str) -> bool:
        """Check whether an effective capability is granted."""
        return self.capabilities.get(capability, False)

    def with_id(self, user_id: UserId) -> User:
        """Return a copy of this record carrying a persisted identity."""
        return dataclasses.replace(self, id=user_id)

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.id}, {self.username})"
