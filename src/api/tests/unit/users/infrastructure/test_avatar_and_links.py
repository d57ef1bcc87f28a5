"""Unit tests for avatar resolution, link building and password hashing."""

import base64
import hashlib

import bcrypt

from users.infrastructure.avatar import GravatarAvatarResolver
from users.infrastructure.links import BaseUrlLinkBuilder
from users.infrastructure.security import hash_password


class TestGravatarAvatarResolver:
    def test_hashes_normalized_email(self):
        resolver = GravatarAvatarResolver()
        digest = hashlib.md5(b"alice@example.com").hexdigest()

        url = resolver.get_avatar_url("  Alice@Example.com ")

        assert url == f"https://secure.gravatar.com/avatar/{digest}?s=96&d=mm"

    def test_custom_settings(self):
        resolver = GravatarAvatarResolver(
            base_url="https://avatars.test/", size=48, default="identicon"
        )

        assert resolver.get_avatar_url("").startswith("https://avatars.test/")
        assert resolver.get_avatar_url("").endswith("?s=48&d=identicon")


class TestBaseUrlLinkBuilder:
    def test_joins_path_onto_base(self):
        builder = BaseUrlLinkBuilder("https://api.example.com/")

        assert builder.url_for("/users/7") == "https://api.example.com/users/7"

    def test_keeps_base_path(self):
        builder = BaseUrlLinkBuilder("https://example.com/api/v2")

        assert builder.url_for("users") == "https://example.com/api/v2/users"


def _digest(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode()).digest())


def test_hash_password_is_verifiable_bcrypt():
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert bcrypt.checkpw(_digest("correct horse"), hashed.encode())


def test_hash_password_accepts_secrets_longer_than_bcrypt_limit():
    long_secret = "x" * 73

    hashed = hash_password(long_secret)

    assert bcrypt.checkpw(_digest(long_secret), hashed.encode())
    assert not bcrypt.checkpw(_digest("x" * 72), hashed.encode())
