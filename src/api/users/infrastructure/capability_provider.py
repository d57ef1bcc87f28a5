"""Role-backed implementation of the AuthorizationProvider protocol.

Answers capability checks from the caller's stored roles and direct
capability overrides. Meta capabilities scoped to a user are resolved to
their primitive capability, except that a user may always edit themselves.
"""

from __future__ import annotations

from shared_kernel.authorization.observability import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from shared_kernel.authorization.protocols import AuthorizationError
from shared_kernel.authorization.types import ResourceType, parse_resource
from users.domain.value_objects import Capability, UserId
from users.ports.repositories import IUserRepository


class RoleCapabilityAuthorizationProvider:
    """Authorization provider backed by the user repository.

    Each check costs one repository round trip to load the subject.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        probe: AuthorizationProbe | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            user_repository: Repository used to load the subject's roles
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._probe = probe or DefaultAuthorizationProbe()

    async def check_permission(
        self,
        resource: str,
        permission: str,
        subject: str,
    ) -> bool:
        """Check if a subject holds a capability on a resource.

        Raises:
            AuthorizationError: If the resource or subject is malformed
        """
        try:
            subject_type, subject_id = parse_resource(subject)
            _, target_id = parse_resource(resource)
            if subject_type != ResourceType.USER or subject_id is None:
                raise ValueError(f"Unsupported subject: {subject!r}")
            caller_id = UserId.from_string(subject_id)
            target = UserId.from_string(target_id) if target_id is not None else None
        except ValueError as e:
            self._probe.permission_check_failed(
                resource=resource, permission=permission, subject=subject, error=e
            )
            raise AuthorizationError(str(e)) from e

        granted = await self._resolve(caller_id, permission, target)

        self._probe.permission_checked(
            resource=resource, permission=permission, subject=subject, granted=granted
        )
        return granted

    async def _resolve(
        self, caller_id: UserId, permission: str, target: UserId | None
    ) -> bool:
        try:
            capability: Capability | None = Capability(permission)
        except ValueError:
            capability = None

        if capability == Capability.EDIT_USER and target == caller_id:
            return True

        caller = await self._user_repository.get_by_id(caller_id)
        if caller is None:
            return False

        required = capability.primitive().value if capability else permission
        return caller.has_capability(required)
