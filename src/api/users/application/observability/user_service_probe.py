"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for user service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def users_listed(self, caller_id: int, page: int, count: int) -> None:
        """Record that a page of users was listed."""
        ...

    def user_retrieved(self, caller_id: int, user_id: int) -> None:
        """Record that a single user was retrieved."""
        ...

    def user_created(self, caller_id: int, user_id: int, username: str) -> None:
        """Record that a user was created."""
        ...

    def user_updated(self, caller_id: int, user_id: int) -> None:
        """Record that a user was updated."""
        ...

    def user_deleted(self, caller_id: int, user_id: int, reassigned_to: int | None) -> None:
        """Record that a user was deleted."""
        ...

    def user_operation_failed(
        self,
        operation: str,
        caller_id: int,
        error: str,
        user_id: int | None = None,
    ) -> None:
        """Record that a user operation failed."""
        ...

    def post_persist_hook_failed(self, user_id: int, error: str) -> None:
        """Record that the post-persist notification hook raised."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def users_listed(self, caller_id: int, page: int, count: int) -> None:
        """Record that a page of users was listed."""
        self._logger.debug(
            "users_listed",
            caller_id=caller_id,
            page=page,
            count=count,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, caller_id: int, user_id: int) -> None:
        """Record that a single user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            caller_id=caller_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_created(self, caller_id: int, user_id: int, username: str) -> None:
        """Record that a user was created."""
        self._logger.info(
            "user_created",
            caller_id=caller_id,
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def user_updated(self, caller_id: int, user_id: int) -> None:
        """Record that a user was updated."""
        self._logger.info(
            "user_updated",
            caller_id=caller_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, caller_id: int, user_id: int, reassigned_to: int | None) -> None:
        """Record that a user was deleted."""
        self._logger.info(
            "user_deleted",
            caller_id=caller_id,
            user_id=user_id,
            reassigned_to=reassigned_to,
            **self._get_context_kwargs(),
        )

    def user_operation_failed(
        self,
        operation: str,
        caller_id: int,
        error: str,
        user_id: int | None = None,
    ) -> None:
        """Record that a user operation failed."""
        self._logger.error(
            "user_operation_failed",
            operation=operation,
            caller_id=caller_id,
            user_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def post_persist_hook_failed(self, user_id: int, error: str) -> None:
        """Record that the post-persist notification hook raised."""
        self._logger.warning(
            "user_post_persist_hook_failed",
            user_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )
