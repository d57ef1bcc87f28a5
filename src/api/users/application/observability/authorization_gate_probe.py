"""Protocol for authorization gate observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthorizationGateProbe(Protocol):
    """Domain probe for authorization decisions on the user resource."""

    def access_granted(
        self,
        caller_id: int,
        action: str,
        target_id: int | None,
    ) -> None:
        """Record that an action was allowed."""
        ...

    def access_denied(
        self,
        caller_id: int,
        action: str,
        target_id: int | None,
    ) -> None:
        """Record that an action was denied."""
        ...

    def with_context(self, context: ObservationContext) -> AuthorizationGateProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthorizationGateProbe:
    """Default implementation of AuthorizationGateProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultAuthorizationGateProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthorizationGateProbe(logger=self._logger, context=context)

    def access_granted(
        self,
        caller_id: int,
        action: str,
        target_id: int | None,
    ) -> None:
        self._logger.debug(
            "user_access_granted",
            caller_id=caller_id,
            action=action,
            target_id=target_id,
            **self._get_context_kwargs(),
        )

    def access_denied(
        self,
        caller_id: int,
        action: str,
        target_id: int | None,
    ) -> None:
        self._logger.warning(
            "user_access_denied",
            caller_id=caller_id,
            action=action,
            target_id=target_id,
            **self._get_context_kwargs(),
        )
