"""Value objects for the Users domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class UserId:
    """Identifier for a User aggregate.

    User ids are positive integers assigned by the persistence layer. The
    value ``0`` is reserved for records that have not been persisted yet.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"UserId value must be an int, got {self.value!r}")
        if self.value < 0:
            raise ValueError(f"Invalid UserId: {self.value}")

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)

    @property
    def is_persisted(self) -> bool:
        """Whether this id refers to a stored record."""
        return self.value > 0

    @classmethod
    def unsaved(cls) -> UserId:
        """Return the id carried by records that are not yet persisted."""
        return cls(value=0)

    @classmethod
    def from_string(cls, value: str | int) -> UserId:
        """Create a persisted UserId from a path or payload value.

        Args:
            value: A positive integer, or its decimal string form

        Returns:
            UserId instance

        Raises:
            ValueError: If value is not a positive integer
        """
        try:
            parsed = int(str(value).strip())
        except ValueError as e:
            raise ValueError(f"Invalid UserId: {value}") from e

        if parsed <= 0:
            raise ValueError(f"Invalid UserId: {value}")

        return cls(value=parsed)


class Capability(StrEnum):
    """Capabilities recognized by the user resource.

    The ``*_users`` members are primitive capabilities granted through roles
    or direct overrides. ``EDIT_USER`` and ``DELETE_USER`` are meta
    capabilities that are always checked against a specific target and are
    resolved to their primitive counterpart.
    """

    READ = "read"
    LIST_USERS = "list_users"
    CREATE_USERS = "create_users"
    EDIT_USERS = "edit_users"
    DELETE_USERS = "delete_users"
    PROMOTE_USERS = "promote_users"
    REMOVE_USERS = "remove_users"
    ADD_USERS = "add_users"

    EDIT_USER = "edit_user"
    DELETE_USER = "delete_user"

    @property
    def is_meta(self) -> bool:
        """Whether this capability must be scoped to a target."""
        return self in _META_CAPABILITIES

    def primitive(self) -> Capability:
        """Return the primitive capability a meta capability maps to."""
        return _META_CAPABILITIES.get(self, self)


_META_CAPABILITIES: dict[Capability, Capability] = {
    Capability.EDIT_USER: Capability.EDIT_USERS,
    Capability.DELETE_USER: Capability.DELETE_USERS,
}


@dataclass(frozen=True)
class ScopedCapability:
    """A capability optionally scoped to one target user.

    ``target=None`` asks about the capability over any user ("edit any"),
    while a concrete target asks about one record ("edit user 7").
    """

    capability: Capability
    target: UserId | None = None

    def __str__(self) -> str:
        """Return string representation."""
        if self.target is None:
            return self.capability.value
        return f"{self.capability.value}({self.target})"


class ViewContext(StrEnum):
    """Richness of a user representation.

    VIEW is the public-safe projection; EDIT additionally exposes the
    record's direct capability overrides.
    """

    VIEW = "view"
    EDIT = "edit"
