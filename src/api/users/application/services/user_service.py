"""User application service for the Users bounded context.

Orchestrates the five operations of the user resource. Each operation is a
short pipeline: authorize, validate, delegate to the repository, shape the
response. Every operation either returns a value or raises exactly one
``UserAPIError``; nothing is retried.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from users.application.authorization import UserAction, UserAuthorizationGate
from users.application.hooks import UserHooks
from users.application.observability import DefaultUserServiceProbe, UserServiceProbe
from users.application.representation import UserRepresentationMapper
from users.application.value_objects import Caller, CreatedUser, MutationPayload
from users.domain.aggregates import User
from users.domain.value_objects import UserId, ViewContext
from users.ports.exceptions import (
    PersistenceFailure,
    UserExistsError,
    UserNotFoundError,
    UserValidationError,
)
from users.ports.repositories import DEFAULT_PAGE_SIZE, IUserRepository, UserQuery

_REQUIRED_ON_UPDATE = ("username", "password", "email")

# Largest OFFSET/LIMIT a bigint query parameter can carry
_MAX_ROWS = 2**63 - 1


def _parse_user_id(value: UserId | int | str, message: str, field: str = "id") -> UserId:
    """Parse a client-supplied id into a persisted UserId.

    Raises:
        UserValidationError: If the value is not a positive integer
    """
    if isinstance(value, UserId):
        if value.is_persisted:
            return value
        raise UserValidationError(message, code="user_invalid_id", field=field)
    try:
        return UserId.from_string(value)
    except ValueError as e:
        raise UserValidationError(message, code="user_invalid_id", field=field) from e


class UserService:
    """Application service for the user resource.

    Write operations run inside a single database transaction so that the
    fetch, authorization and persist steps share one unit of work. The
    repository remains responsible for uniqueness and identity assignment.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        gate: UserAuthorizationGate,
        mapper: UserRepresentationMapper,
        hooks: UserHooks | None = None,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            session: Database session for transaction management
            gate: Authorization gate for the user resource
            mapper: Builds user representations and applies payloads
            hooks: Optional extension hooks
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._session = session
        self._gate = gate
        self._mapper = mapper
        self._hooks = hooks or UserHooks()
        self._probe = probe or DefaultUserServiceProbe()

    async def _represent(
        self,
        caller: Caller,
        user: User,
        context: ViewContext,
    ) -> dict[str, Any]:
        """Represent a user, downgrading ``edit`` for callers who may not edit it."""
        if context == ViewContext.EDIT and caller.user_id != user.id:
            decision = await self._gate.check(caller, UserAction.EDIT, user.id)
            if not decision.allowed:
                context = ViewContext.VIEW

        return await self._mapper.to_external(user, context, caller.user_id)

    async def list_users(
        self,
        caller: Caller,
        filter: Mapping[str, Any] | None = None,
        context: ViewContext = ViewContext.VIEW,
        page: int | str = 1,
    ) -> list[dict[str, Any]]:
        """List users, ordered by username and paginated.

        Args:
            caller: The caller (must hold list_users)
            filter: Extra query arguments merged over the default ordering
            context: Requested representation richness
            page: 1-indexed page number

        Returns:
            Representations of the users on the requested page; an empty
            list when the page is out of range

        Raises:
            ForbiddenError: If the caller may not list users
            UserValidationError: If pagination or filter arguments are not numeric
        """
        filter = dict(filter or {})
        await self._gate.authorize(caller, UserAction.LIST)

        try:
            page_number = max(abs(int(page)), 1)
        except (TypeError, ValueError) as e:
            raise UserValidationError(
                "Invalid page number.", code="user_invalid_page", field="page"
            ) from e

        args: dict[str, Any] = {"orderby": "username", "order": "ASC", **filter}
        args = await self._hooks.query(args, filter, context, page_number)

        try:
            number = abs(int(args.get("number") or 0)) or DEFAULT_PAGE_SIZE
            args["number"] = number
            args["offset"] = (page_number - 1) * number
            query = UserQuery.from_args(args)
        except (TypeError, ValueError) as e:
            raise UserValidationError(
                "Invalid query parameters.", code="user_invalid_query"
            ) from e

        if query.offset > _MAX_ROWS:
            users: list[User] = []
        else:
            users = await self._user_repository.search(
                dataclasses.replace(query, number=min(query.number, _MAX_ROWS))
            )
        self._probe.users_listed(
            caller_id=caller.user_id.value, page=page_number, count=len(users)
        )
        if not users:
            return []

        return [await self._represent(caller, user, context) for user in users]

    async def get_user(
        self,
        caller: Caller,
        user_id: UserId | int | str,
        context: ViewContext = ViewContext.VIEW,
    ) -> dict[str, Any]:
        """Retrieve a single user.

        Callers may always view themselves; viewing anyone else requires
        list_users.

        Raises:
            UserValidationError: If the id is not a positive integer
            ForbiddenError: If the caller may not view the user
            UserNotFoundError: If the user does not exist
        """
        user_id = _parse_user_id(user_id, "Invalid user ID.")
        await self._gate.authorize(caller, UserAction.VIEW, user_id)

        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        self._probe.user_retrieved(caller_id=caller.user_id.value, user_id=user_id.value)
        return await self._represent(caller, user, context)

    async def create_user(self, caller: Caller, payload: MutationPayload) -> CreatedUser:
        """Create a new user.

        Raises:
            ForbiddenError: If the caller may not create users
            UserExistsError: If the payload already carries an identity
            UserValidationError: If a supplied value is malformed
            UserRepositoryError: If the repository rejects the new user
        """
        try:
            async with self._session.begin():
                await self._gate.authorize(caller, UserAction.CREATE)
                if payload.is_update:
                    raise UserExistsError()

                user_id = await self._upsert(caller, payload)

        except Exception as e:
            self._probe.user_operation_failed(
                operation="create",
                caller_id=caller.user_id.value,
                error=str(e),
            )
            raise

        self._probe.user_created(
            caller_id=caller.user_id.value,
            user_id=user_id.value,
            username=payload.username or "",
        )

        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        return CreatedUser(
            user_id=user_id,
            representation=await self._represent(caller, user, ViewContext.VIEW),
            location=self._mapper.resource_url(user_id),
        )

    async def update_user(
        self,
        caller: Caller,
        user_id: UserId | int | str,
        payload: MutationPayload,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Update an existing user.

        The payload identity is forced to ``user_id``. Updates re-validate
        the account as a whole: username, password and email must be
        supplied even when they are not changing.

        Raises:
            UserValidationError: If the id is invalid or a required field is missing
            ForbiddenError: If the caller may not edit the user
            UserNotFoundError: If the user does not exist
            UserRepositoryError: If the repository rejects the changes
        """
        user_id = _parse_user_id(user_id, "User ID must be supplied.")

        try:
            async with self._session.begin():
                await self._gate.authorize(caller, UserAction.EDIT, user_id)

                existing = await self._user_repository.get_by_id(user_id)
                if existing is None:
                    raise UserNotFoundError("User ID is invalid.")

                await self._upsert(caller, payload.with_id(user_id))

        except Exception as e:
            self._probe.user_operation_failed(
                operation="update",
                caller_id=caller.user_id.value,
                user_id=user_id.value,
                error=str(e),
            )
            raise

        self._probe.user_updated(caller_id=caller.user_id.value, user_id=user_id.value)

        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User ID is invalid.")

        return await self._represent(caller, user, ViewContext.VIEW)

    async def delete_user(
        self,
        caller: Caller,
        user_id: UserId | int | str,
        force: bool = False,
        reassign: UserId | int | str | None = None,
    ) -> dict[str, str]:
        """Delete a user.

        ``force`` is accepted for compatibility and passed through untouched.

        Args:
            caller: The caller (must hold delete_user for the target)
            user_id: The user to delete
            force: Accepted, not interpreted
            reassign: User that inherits the deleted user's content, if any

        Returns:
            Confirmation message

        Raises:
            UserValidationError: If an id is invalid
            ForbiddenError: If the caller may not delete the user
            UserNotFoundError: If the user does not exist
            PersistenceFailure: If the repository did not delete the user
        """
        user_id = _parse_user_id(user_id, "Invalid user ID.")
        reassign_id = (
            _parse_user_id(reassign, "Invalid reassign user ID.", field="reassign")
            if reassign not in (None, "")
            else None
        )

        try:
            async with self._session.begin():
                await self._gate.authorize(caller, UserAction.DELETE, user_id)

                existing = await self._user_repository.get_by_id(user_id)
                if existing is None:
                    raise UserNotFoundError()

                if reassign_id is not None:
                    if reassign_id == user_id or (
                        await self._user_repository.get_by_id(reassign_id) is None
                    ):
                        raise UserValidationError(
                            "Invalid reassign user ID.",
                            code="user_invalid_reassign",
                            field="reassign",
                        )

                deleted = await self._user_repository.delete(
                    user_id, reassign_to=reassign_id
                )
                if not deleted:
                    raise PersistenceFailure(
                        "The user cannot be deleted.", code="user_cannot_delete"
                    )

        except Exception as e:
            self._probe.user_operation_failed(
                operation="delete",
                caller_id=caller.user_id.value,
                user_id=user_id.value,
                error=str(e),
            )
            raise

        self._probe.user_deleted(
            caller_id=caller.user_id.value,
            user_id=user_id.value,
            reassigned_to=reassign_id.value if reassign_id is not None else None,
        )
        return {"message": "Deleted user"}

    async def _upsert(self, caller: Caller, payload: MutationPayload) -> UserId:
        """Create or update a user from a payload.

        Update mode is selected by a nonzero payload identity. Must run
        inside the caller's transaction.

        Returns:
            The identity of the stored user
        """
        is_update = payload.is_update

        if is_update:
            user_id = _parse_user_id(payload.id or 0, "Invalid user ID.", field="ID")
            existing = await self._user_repository.get_by_id(user_id)
            if existing is None:
                raise UserNotFoundError()

            await self._gate.authorize(caller, UserAction.EDIT, user_id)

            supplied = {
                "username": payload.username,
                "password": payload.password,
                "email": payload.email,
            }
            for field in _REQUIRED_ON_UPDATE:
                if not supplied[field]:
                    raise UserValidationError(
                        f"Missing parameter {field}",
                        code="missing_parameter",
                        field=field,
                    )

            user = existing
        else:
            user = User.new()
            await self._gate.authorize(caller, UserAction.CREATE)

        user = self._mapper.apply_mutation(user, payload)
        user = await self._hooks.pre_persist(user, payload)

        if is_update:
            saved_id = await self._user_repository.update(user)
        else:
            saved_id = await self._user_repository.insert(user)

        user = user.with_id(saved_id)

        try:
            await self._hooks.post_persist(user, payload, is_update)
        except Exception as e:
            self._probe.post_persist_hook_failed(user_id=saved_id.value, error=str(e))

        return saved_id
