"""Extension points for user resource operations.

External policy plugs into the user resource through four hooks, injected
into the service and mapper at construction time. Every hook is optional;
the defaults leave behavior unchanged.

- query hook: adjusts the query arguments of a list before it runs
- pre-persist hook: may veto (by raising) or replace a record before it is stored
- post-persist hook: observes a stored record; its failures never fail a request
- representation hook: may add, remove or override representation fields
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from users.application.value_objects import MutationPayload
from users.domain.aggregates import User
from users.domain.value_objects import UserId, ViewContext

QueryHook = Callable[
    [dict[str, Any], Mapping[str, Any], ViewContext, int],
    Awaitable[dict[str, Any]],
]
PrePersistHook = Callable[[User, MutationPayload], Awaitable[User]]
PostPersistHook = Callable[[User, MutationPayload, bool], Awaitable[None]]
RepresentationHook = Callable[
    [dict[str, Any], User, ViewContext, UserId],
    Awaitable[dict[str, Any]],
]


async def default_query_hook(
    args: dict[str, Any],
    filter: Mapping[str, Any],
    context: ViewContext,
    page: int,
) -> dict[str, Any]:
    return args


async def default_pre_persist_hook(user: User, payload: MutationPayload) -> User:
    return user


async def default_post_persist_hook(
    user: User, payload: MutationPayload, is_update: bool
) -> None:
    return None


async def default_representation_hook(
    representation: dict[str, Any],
    user: User,
    context: ViewContext,
    caller_id: UserId,
) -> dict[str, Any]:
    return representation


@dataclass(frozen=True)
class UserHooks:
    """The set of extension hooks used by the user resource."""

    query: QueryHook = default_query_hook
    pre_persist: PrePersistHook = default_pre_persist_hook
    post_persist: PostPersistHook = default_post_persist_hook
    representation: RepresentationHook = default_representation_hook
