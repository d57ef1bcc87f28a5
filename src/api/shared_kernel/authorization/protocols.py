"""Authorization provider protocol.

Defines the interface for capability checks, allowing for swappable
implementations (role-backed database lookups, mocks, external policy engines).
"""

from __future__ import annotations

from typing import Protocol


class AuthorizationError(Exception):
    """Raised when the authorization system itself cannot answer a check."""

    pass


class AuthorizationProvider(Protocol):
    """Protocol for authorization providers.

    Implementations answer whether a subject holds a capability, optionally
    scoped to a single resource. The wildcard resource (``user:*``) asks
    about the unscoped capability.
    """

    async def check_permission(
        self,
        resource: str,
        permission: str,
        subject: str,
    ) -> bool:
        """Check if a subject holds a capability on a resource.

        Args:
            resource: Resource identifier (e.g., "user:7" or "user:*")
            permission: Capability name (e.g., "edit_user", "list_users")
            subject: Subject identifier (e.g., "user:3")

        Returns:
            True if the capability is granted, False otherwise

        Raises:
            AuthorizationError: If the check cannot be performed
        """
        ...
