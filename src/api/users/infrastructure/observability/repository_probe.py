"""Domain probe for user repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to user persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_saved(self, user_id: int, username: str, created: bool) -> None:
        """Record that a user was successfully inserted or updated."""
        ...

    def user_retrieved(self, user_id: int) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, user_id: int) -> None:
        """Record that a user was not found."""
        ...

    def users_searched(self, count: int, offset: int, number: int) -> None:
        """Record that a user search ran."""
        ...

    def user_deleted(self, user_id: int, reassigned_to: int | None) -> None:
        """Record that a user was deleted."""
        ...

    def duplicate_username(self, username: str) -> None:
        """Record that a username was already taken."""
        ...

    def duplicate_email(self, email: str) -> None:
        """Record that an email address was already taken."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_saved(self, user_id: int, username: str, created: bool) -> None:
        """Record that a user was successfully inserted or updated."""
        self._logger.info(
            "user_saved",
            user_id=user_id,
            username=username,
            created=created,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, user_id: int) -> None:
        """Record that a user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: int) -> None:
        """Record that a user was not found."""
        self._logger.debug(
            "user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def users_searched(self, count: int, offset: int, number: int) -> None:
        """Record that a user search ran."""
        self._logger.debug(
            "users_searched",
            count=count,
            offset=offset,
            number=number,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: int, reassigned_to: int | None) -> None:
        """Record that a user was deleted."""
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            reassigned_to=reassigned_to,
            **self._get_context_kwargs(),
        )

    def duplicate_username(self, username: str) -> None:
        """Record that a username was already taken."""
        self._logger.warning(
            "duplicate_username",
            username=username,
            **self._get_context_kwargs(),
        )

    def duplicate_email(self, email: str) -> None:
        """Record that an email address was already taken."""
        self._logger.warning(
            "duplicate_email",
            email=email,
            **self._get_context_kwargs(),
        )
