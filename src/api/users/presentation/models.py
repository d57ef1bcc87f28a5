"""Request and response models for the user resource."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from users.application.value_objects import MutationPayload


class UserMutationRequest(BaseModel):
    """Body of create and update requests.

    Every field is optional. Keys outside the allow-list (including
    ``roles`` and ``capabilities``) are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int | str | None = Field(
        default=None,
        alias="ID",
        description="Identity of an existing user; absent or zero creates",
    )
    username: str | None = Field(default=None, description="Login name")
    password: str | None = Field(default=None, description="Write-only secret")
    name: str | None = Field(default=None, description="Display name")
    first_name: str | None = None
    last_name: str | None = None
    nickname: str | None = None
    slug: str | None = None
    url: str | None = Field(default=None, alias="URL", description="Website URL")
    description: str | None = None
    email: str | None = None

    def to_payload(self, with_identity: bool = True) -> MutationPayload:
        """Convert to the application-layer payload.

        Updates take their identity from the path, so they drop ``ID``.
        """
        exclude = None if with_identity else {"id"}
        return MutationPayload.from_mapping(
            self.model_dump(by_alias=True, exclude_none=True, exclude=exclude)
        )


class DeletedUserResponse(BaseModel):
    """Confirmation returned by a successful delete."""

    message: str = Field(..., examples=["Deleted user"])
