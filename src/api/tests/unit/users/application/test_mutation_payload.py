"""Unit tests for MutationPayload parsing."""

import pytest

from users.application.value_objects import MutationPayload
from users.domain.value_objects import UserId
from users.ports.exceptions import UserValidationError


class TestFromMapping:
    def test_wire_keys_are_read(self):
        payload = MutationPayload.from_mapping(
            {"ID": "12", "username": "alice", "URL": "https://alice.example/"}
        )

        assert payload.id == 12
        assert payload.username == "alice"
        assert payload.url == "https://alice.example/"
        assert payload.is_update

    def test_missing_or_zero_id_means_create(self):
        assert not MutationPayload.from_mapping({}).is_update
        assert not MutationPayload.from_mapping({"ID": 0}).is_update

    def test_unknown_keys_and_roles_are_ignored(self):
        payload = MutationPayload.from_mapping(
            {"username": "bob", "roles": ["administrator"], "foo": 1}
        )

        assert payload == MutationPayload(username="bob")

    def test_non_numeric_id_is_rejected(self):
        with pytest.raises(UserValidationError) as exc_info:
            MutationPayload.from_mapping({"ID": "abc"})

        assert exc_info.value.code == "user_invalid_id"
        assert exc_info.value.field == "ID"

    def test_non_string_values_are_stringified(self):
        payload = MutationPayload.from_mapping({"nickname": 42})

        assert payload.nickname == "42"

    def test_empty_string_is_kept_as_supplied(self):
        payload = MutationPayload.from_mapping({"first_name": ""})

        assert payload.first_name == ""
        assert payload.last_name is None


class TestPayloadHelpers:
    def test_with_id_forces_identity(self):
        payload = MutationPayload(id=3, username="carol")

        forced = payload.with_id(UserId(value=9))

        assert forced.id == 9
        assert forced.username == "carol"

    def test_repr_never_contains_password(self):
        payload = MutationPayload(username="dave", password="hunter2")

        assert "hunter2" not in repr(payload)
