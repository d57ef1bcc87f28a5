"""Absolute URL construction for API resources."""

from __future__ import annotations


class BaseUrlLinkBuilder:
    """Builds resource URLs by joining paths onto the public API base URL."""

    def __init__(self, base_url: str) -> None:
        self._base_url = base_url.rstrip("/")

    def url_for(self, path: str) -> str:
        """Return the absolute URL of an API path (e.g., "/users/7")."""
        return f"{self._base_url}/{path.lstrip('/')}"
