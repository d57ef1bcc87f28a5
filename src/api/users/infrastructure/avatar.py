"""Gravatar-style avatar resolution."""

from __future__ import annotations

import hashlib
from urllib.parse import urlencode


class GravatarAvatarResolver:
    """Resolves avatar URLs by hashing the normalized email address."""

    def __init__(
        self,
        base_url: str = "https://secure.gravatar.com/avatar",
        size: int = 96,
        default: str = "mm",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._size = size
        self._default = default

    def get_avatar_url(self, email: str) -> str:
        """Return the avatar URL for an email address."""
        digest = hashlib.md5(email.strip().lower().encode()).hexdigest()
        query = urlencode({"s": self._size, "d": self._default})
        return f"{self._base_url}/{digest}?{query}"
