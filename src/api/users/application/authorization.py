"""Authorization gate for user resource operations.

Maps an intended action on the user resource to an allow/deny decision
based on the caller's capabilities. The gate never mutates anything; asking
the same question twice yields the same answer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import (
    ResourceType,
    format_resource,
    format_subject,
)
from users.application.observability import (
    AuthorizationGateProbe,
    DefaultAuthorizationGateProbe,
)
from users.application.value_objects import Caller
from users.domain.value_objects import Capability, ScopedCapability, UserId
from users.ports.exceptions import ForbiddenError


class UserAction(StrEnum):
    """Actions that can be taken on the user resource."""

    LIST = "list"
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


_DENIALS: dict[UserAction, tuple[str, str]] = {
    UserAction.LIST: (
        "user_cannot_list",
        "Sorry, you are not allowed to list users.",
    ),
    UserAction.VIEW: (
        "user_cannot_view",
        "Sorry, you are not allowed to view this user.",
    ),
    UserAction.CREATE: (
        "user_cannot_create",
        "Sorry, you are not allowed to create users.",
    ),
    UserAction.EDIT: (
        "user_cannot_edit",
        "Sorry, you are not allowed to edit this user.",
    ),
    UserAction.DELETE: (
        "user_cannot_delete",
        "Sorry, you are not allowed to delete this user.",
    ),
}


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of an authorization check.

    Attributes:
        allowed: Whether the action may proceed
        action: The action that was checked
        code: Machine-readable denial code (None when allowed)
        reason: Human-readable denial message (None when allowed)
    """

    allowed: bool
    action: UserAction
    code: str | None = None
    reason: str | None = None

    @classmethod
    def allow(cls, action: UserAction) -> AuthorizationDecision:
        return cls(allowed=True, action=action)

    @classmethod
    def deny(cls, action: UserAction) -> AuthorizationDecision:
        code, reason = _DENIALS[action]
        return cls(allowed=False, action=action, code=code, reason=reason)

    def to_error(self) -> ForbiddenError:
        """Build the forbidden error for a denied decision."""
        return ForbiddenError(self.reason, code=self.code)


class UserAuthorizationGate:
    """Decides whether a caller may perform an action on the user resource.

    Rules:
    - list: caller holds ``list_users``
    - view(T): caller is T, or holds ``list_users``
    - create: caller holds ``create_users``
    - edit(T): caller holds ``edit_user`` scoped to T
    - delete(T): caller holds ``delete_user`` scoped to T
    """

    def __init__(
        self,
        authz: AuthorizationProvider,
        probe: AuthorizationGateProbe | None = None,
    ):
        """Initialize the gate.

        Args:
            authz: Authorization provider answering capability checks
            probe: Optional domain probe for observability
        """
        self._authz = authz
        self._probe = probe or DefaultAuthorizationGateProbe()

    async def holds(self, caller: Caller, scoped: ScopedCapability) -> bool:
        """Check whether the caller holds a (possibly scoped) capability."""
        target_id = scoped.target.value if scoped.target is not None else None
        return await self._authz.check_permission(
            resource=format_resource(ResourceType.USER, target_id),
            permission=scoped.capability.value,
            subject=format_subject(ResourceType.USER, caller.user_id.value),
        )

    async def check(
        self,
        caller: Caller,
        action: UserAction,
        target: UserId | None = None,
    ) -> AuthorizationDecision:
        """Decide whether the caller may perform the action.

        Args:
            caller: The caller requesting the action
            action: The intended action
            target: The user the action applies to (view, edit, delete)

        Returns:
            The authorization decision
        """
        match action:
            case UserAction.LIST:
                allowed = await self.holds(
                    caller, ScopedCapability(Capability.LIST_USERS)
                )
            case UserAction.VIEW:
                allowed = (
                    target is not None and caller.user_id == target
                ) or await self.holds(caller, ScopedCapability(Capability.LIST_USERS))
            case UserAction.CREATE:
                allowed = await self.holds(
                    caller, ScopedCapability(Capability.CREATE_USERS)
                )
            case UserAction.EDIT:
                allowed = await self.holds(
                    caller, ScopedCapability(Capability.EDIT_USER, target)
                )
            case UserAction.DELETE:
                allowed = await self.holds(
                    caller, ScopedCapability(Capability.DELETE_USER, target)
                )

        target_value = target.value if target is not None else None
        if allowed:
            self._probe.access_granted(
                caller_id=caller.user_id.value,
                action=action.value,
                target_id=target_value,
            )
            return AuthorizationDecision.allow(action)

        self._probe.access_denied(
            caller_id=caller.user_id.value,
            action=action.value,
            target_id=target_value,
        )
        return AuthorizationDecision.deny(action)

    async def authorize(
        self,
        caller: Caller,
        action: UserAction,
        target: UserId | None = None,
    ) -> None:
        """Require that the caller may perform the action.

        Raises:
            ForbiddenError: If the action is denied
        """
        decision = await self.check(caller, action, target)
        if not decision.allowed:
            raise decision.to_error()
