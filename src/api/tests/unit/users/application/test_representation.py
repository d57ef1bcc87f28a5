"""Unit tests for user representation mapping."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from users.application.representation import (
    UserRepresentationMapper,
    apply_mutation,
    canonicalize_url,
)
from users.application.value_objects import MutationPayload
from users.domain.aggregates import User
from users.domain.value_objects import UserId, ViewContext
from users.ports.exceptions import UserValidationError

VIEW_KEYS = {
    "ID",
    "username",
    "name",
    "first_name",
    "last_name",
    "nickname",
    "slug",
    "URL",
    "avatar",
    "description",
    "email",
    "registered",
    "roles",
    "capabilities",
    "meta",
}


@pytest.fixture
def avatar_resolver():
    resolver = MagicMock()
    resolver.get_avatar_url.return_value = "https://avatars.test/abc"
    return resolver


@pytest.fixture
def link_builder():
    builder = MagicMock()
    builder.url_for.side_effect = lambda path: f"https://api.test{path}"
    return builder


@pytest.fixture
def mapper(avatar_resolver, link_builder):
    return UserRepresentationMapper(
        avatar_resolver=avatar_resolver, link_builder=link_builder
    )


@pytest.fixture
def stored_user() -> User:
    return User(
        id=UserId(value=7),
        username="alice",
        password="should-never-leak",
        name="Alice",
        email="alice@example.com",
        url="https://alice.example/",
        registered=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
        roles=frozenset({"author"}),
        direct_capabilities={"list_users": True},
    )


class TestToExternal:
    @pytest.mark.asyncio
    async def test_view_representation_fields(self, mapper, stored_user):
        result = await mapper.to_external(stored_user, ViewContext.VIEW, UserId(value=1))

        assert set(result) == VIEW_KEYS
        assert result["ID"] == 7
        assert result["URL"] == "https://alice.example/"
        assert result["avatar"] == "https://avatars.test/abc"
        assert result["registered"] == "2024-01-02T03:04:05+00:00"
        assert result["roles"] == ["author"]
        assert result["capabilities"]["list_users"] is True
        assert result["meta"]["links"] == {
            "self": "https://api.test/users/7",
            "archives": "https://api.test/users/7/posts",
        }

    @pytest.mark.asyncio
    async def test_edit_is_superset_of_view_without_secret(self, mapper, stored_user):
        view = await mapper.to_external(stored_user, ViewContext.VIEW, UserId(value=7))
        edit = await mapper.to_external(stored_user, ViewContext.EDIT, UserId(value=7))

        assert set(view) <= set(edit)
        assert edit["extra_capabilities"] == {"list_users": True}
        for representation in (view, edit):
            assert "password" not in representation
            assert "should-never-leak" not in repr(representation)

    @pytest.mark.asyncio
    async def test_unregistered_user_has_null_registered(self, mapper):
        result = await mapper.to_external(
            User(id=UserId(value=2), username="bob"), ViewContext.VIEW, UserId(value=1)
        )

        assert result["registered"] is None

    @pytest.mark.asyncio
    async def test_representation_hook_receives_caller_and_may_replace(
        self, avatar_resolver, link_builder, stored_user
    ):
        hook = AsyncMock(return_value={"ID": 7, "custom": True})
        mapper = UserRepresentationMapper(
            avatar_resolver=avatar_resolver,
            link_builder=link_builder,
            representation_hook=hook,
        )

        result = await mapper.to_external(stored_user, ViewContext.VIEW, UserId(value=3))

        assert result == {"ID": 7, "custom": True}
        _, user, context, caller_id = hook.call_args.args
        assert user is stored_user
        assert context == ViewContext.VIEW
        assert caller_id == UserId(value=3)


class TestApplyMutation:
    def test_apply_is_pure(self):
        original = User.new()

        updated = apply_mutation(original, MutationPayload(username="erin"))

        assert original.username == ""
        assert updated.username == "erin"

    def test_name_fields_apply_even_when_empty(self):
        user = User(first_name="Old", nickname="oldnick")

        updated = apply_mutation(user, MutationPayload(first_name="", nickname=""))

        assert updated.first_name == ""
        assert updated.nickname == ""

    def test_optional_fields_apply_only_when_non_empty(self):
        user = User(slug="keep", email="keep@example.com", description="keep")

        updated = apply_mutation(
            user, MutationPayload(slug="", email="", description="", url="")
        )

        assert updated.slug == "keep"
        assert updated.email == "keep@example.com"
        assert updated.description == "keep"

    def test_identity_is_never_applied(self):
        user = User(id=UserId(value=4))

        updated = apply_mutation(user, MutationPayload(id=99, username="x"))

        assert updated.id == UserId(value=4)

    def test_url_is_canonicalized(self):
        updated = apply_mutation(
            User.new(), MutationPayload(url=" https://Example.COM/profile ")
        )

        assert updated.url == "https://example.com/profile"

    def test_malformed_url_is_rejected(self):
        with pytest.raises(UserValidationError) as exc_info:
            apply_mutation(User.new(), MutationPayload(url="not a url"))

        assert exc_info.value.code == "user_invalid_url"
        assert exc_info.value.field == "URL"
        assert exc_info.value.message == "Invalid user URL."

    @pytest.mark.asyncio
    async def test_round_trip_through_representation(self, mapper):
        """Supplied fields come back unchanged in the representation."""
        payload = MutationPayload(
            username="frank",
            name="Frank",
            first_name="Frank",
            last_name="Castle",
            nickname="punisher",
            slug="frank",
            url="https://frank.example/blog",
            description="Hello",
            email="frank@example.com",
        )

        user = apply_mutation(User(id=UserId(value=5)), payload)
        result = await mapper.to_external(user, ViewContext.EDIT, UserId(value=5))

        supplied = {
            "username": payload.username,
            "name": payload.name,
            "first_name": payload.first_name,
            "last_name": payload.last_name,
            "nickname": payload.nickname,
            "slug": payload.slug,
            "URL": payload.url,
            "description": payload.description,
            "email": payload.email,
        }
        for key, value in supplied.items():
            assert result[key] == value


def test_canonicalize_url_rejects_non_http_scheme():
    with pytest.raises(UserValidationError):
        canonicalize_url("ftp://files.example/")
