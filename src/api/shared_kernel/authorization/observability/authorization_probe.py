"""Domain probe for authorization operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to capability checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthorizationProbe(Protocol):
    """Domain probe for authorization operations."""

    def permission_checked(
        self,
        resource: str,
        permission: str,
        subject: str,
        granted: bool,
    ) -> None:
        """Record that a permission was checked."""
        ...

    def permission_check_failed(
        self,
        resource: str,
        permission: str,
        subject: str,
        error: Exception,
    ) -> None:
        """Record that checking a permission failed."""
        ...

    def with_context(self, context: ObservationContext) -> AuthorizationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthorizationProbe:
    """Default implementation of AuthorizationProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAuthorizationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthorizationProbe(logger=self._logger, context=context)

    def permission_checked(
        self,
        resource: str,
        permission: str,
        subject: str,
        granted: bool,
    ) -> None:
        """Record that a permission was checked."""
        self._logger.debug(
            "authorization_permission_checked",
            resource=resource,
            permission=permission,
            subject=subject,
            granted=granted,
            **self._get_context_kwargs(),
        )

    def permission_check_failed(
        self,
        resource: str,
        permission: str,
        subject: str,
        error: Exception,
    ) -> None:
        """Record that checking a permission failed."""
        self._logger.error(
            "authorization_permission_check_failed",
            resource=resource,
            permission=permission,
            subject=subject,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
