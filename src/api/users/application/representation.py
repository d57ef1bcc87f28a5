"""Representation mapping for the user resource.

Converts User aggregates into their external representation for a view
context, and applies inbound mutation payloads onto User aggregates.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from users.application.hooks import RepresentationHook, default_representation_hook
from users.application.value_objects import MutationPayload
from users.domain.aggregates import User
from users.domain.value_objects import UserId, ViewContext
from users.ports.exceptions import UserValidationError
from users.ports.services import AvatarResolver, LinkBuilder

_http_url = TypeAdapter(AnyHttpUrl)


def canonicalize_url(value: str) -> str:
    """Canonicalize a profile URL.

    Args:
        value: The URL as supplied by the client

    Returns:
        The canonical form of the URL

    Raises:
        UserValidationError: If the value is not an absolute http(s) URL
    """
    try:
        return str(_http_url.validate_python(value.strip()))
    except ValidationError as e:
        raise UserValidationError(
            "Invalid user URL.", code="user_invalid_url", field="URL"
        ) from e


def apply_mutation(user: User, payload: MutationPayload) -> User:
    """Apply the allow-listed fields of a payload onto a user record.

    Pure: the given record is left untouched and a new record is returned.
    Login, password and name fields are applied whenever supplied; slug,
    URL, description and email only when non-empty. The payload identity is
    never applied.

    Raises:
        UserValidationError: If a supplied URL cannot be canonicalized
    """
    changes: dict[str, Any] = {}

    if payload.username is not None:
        changes["username"] = payload.username
    if payload.password is not None:
        changes["password"] = payload.password

    if payload.name is not None:
        changes["name"] = payload.name
    if payload.first_name is not None:
        changes["first_name"] = payload.first_name
    if payload.last_name is not None:
        changes["last_name"] = payload.last_name
    if payload.nickname is not None:
        changes["nickname"] = payload.nickname
    if payload.slug:
        changes["slug"] = payload.slug

    if payload.url:
        changes["url"] = canonicalize_url(payload.url)

    if payload.description:
        changes["description"] = payload.description
    if payload.email:
        changes["email"] = payload.email

    return dataclasses.replace(user, **changes)


class UserRepresentationMapper:
    """Builds external representations of users.

    The ``view`` representation is public-safe; ``edit`` additionally
    exposes the record's direct capability overrides. The password never
    appears in either.
    """

    def __init__(
        self,
        avatar_resolver: AvatarResolver,
        link_builder: LinkBuilder,
        representation_hook: RepresentationHook | None = None,
    ):
        """Initialize the mapper.

        Args:
            avatar_resolver: Resolves avatar URLs from email addresses
            link_builder: Builds absolute resource URLs
            representation_hook: Optional hook that may replace the representation
        """
        self._avatar_resolver = avatar_resolver
        self._link_builder = link_builder
        self._representation_hook = representation_hook or default_representation_hook

    def resource_url(self, user_id: UserId) -> str:
        """Return the absolute URL of a user resource."""
        return self._link_builder.url_for(f"/users/{user_id.value}")

    async def to_external(
        self,
        user: User,
        context: ViewContext,
        caller_id: UserId,
    ) -> dict[str, Any]:
        """Build the external representation of a user.

        Args:
            user: The user to represent
            context: The requested representation richness
            caller_id: Identity of the caller the representation is built for

        Returns:
            The representation, as shaped by the representation hook
        """
        representation: dict[str, Any] = {
            "ID": user.id.value,
            "username": user.username,
            "name": user.name,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "nickname": user.nickname,
            "slug": user.slug,
            "URL": user.url,
            "avatar": self._avatar_resolver.get_avatar_url(user.email),
            "description": user.description,
            "email": user.email,
            "registered": user.registered.isoformat() if user.registered else None,
            "roles": sorted(user.roles),
            "capabilities": user.capabilities,
        }

        if context == ViewContext.EDIT:
            representation["extra_capabilities"] = dict(user.direct_capabilities)

        representation["meta"] = {
            "links": {
                "self": self.resource_url(user.id),
                "archives": self._link_builder.url_for(
                    f"/users/{user.id.value}/posts"
                ),
            },
        }

        return await self._representation_hook(representation, user, context, caller_id)

    def apply_mutation(self, user: User, payload: MutationPayload) -> User:
        """Apply a payload onto a user record; see ``apply_mutation``."""
        return apply_mutation(user, payload)
