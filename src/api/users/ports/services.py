"""Service protocols (ports) for collaborators of the user resource."""

from __future__ import annotations

from typing import Protocol


class AvatarResolver(Protocol):
    """Resolves the avatar image URL for an email address."""

    def get_avatar_url(self, email: str) -> str:
        """Return the avatar URL for an email address."""
        ...


class LinkBuilder(Protocol):
    """Builds absolute URLs for API resources."""

    def url_for(self, path: str) -> str:
        """Return the absolute URL of an API path (e.g., "/users/7")."""
        ...
