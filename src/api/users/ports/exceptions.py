"""Exceptions for the Users bounded context.

Every failure an operation on the user resource can produce is a
``UserAPIError`` carrying a stable machine-readable ``code``, a human
message and the HTTP status it is rendered with. The application layer
raises them; the presentation layer renders them without reinterpretation.
"""

from __future__ import annotations

from typing import Any


class UserAPIError(Exception):
    """Base class for errors raised by user resource operations."""

    code: str = "user_error"
    status_code: int = 500
    default_message: str = "An error occurred."

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        field: str | None = None,
    ):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        self.field = field
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        """Render the error body sent to API clients."""
        data: dict[str, Any] = {"status": self.status_code}
        if self.field is not None:
            data["field"] = self.field
        return {"code": self.code, "message": self.message, "data": data}


class ForbiddenError(UserAPIError):
    """Raised when the caller fails an authorization check.

    The code and message are specific to the denied action.
    """

    code = "user_forbidden"
    status_code = 403
    default_message = "Sorry, you are not allowed to do that."


class UserValidationError(UserAPIError):
    """Raised for malformed or missing input.

    Covers invalid ids, missing required parameters and malformed URLs.
    """

    code = "user_invalid_parameter"
    status_code = 400
    default_message = "Invalid parameter."


class UserExistsError(UserAPIError):
    """Raised when create is called with a payload that already has an identity."""

    code = "user_exists"
    status_code = 400
    default_message = "Cannot create existing user."


class UserNotFoundError(UserAPIError):
    """Raised when the referenced user does not exist."""

    code = "user_invalid_id"
    status_code = 404
    default_message = "Invalid user ID."


class PersistenceFailure(UserAPIError):
    """Raised when persistence reports an unrecoverable failure."""

    code = "user_persistence_failure"
    status_code = 500
    default_message = "The user could not be saved."


class UserRepositoryError(UserAPIError):
    """Base class for errors originating in the user repository.

    These are surfaced to clients with their original kind.
    """

    code = "user_repository_error"
    status_code = 500
    default_message = "The user store rejected the operation."


class DuplicateUsernameError(UserRepositoryError):
    """Raised when the username is already registered to another user."""

    code = "existing_user_login"
    status_code = 409
    default_message = "Sorry, that username already exists!"


class DuplicateEmailError(UserRepositoryError):
    """Raised when the email address is already registered to another user."""

    code = "existing_user_email"
    status_code = 409
    default_message = "Sorry, that email address is already used!"


class EmptyUsernameError(UserRepositoryError):
    """Raised when a user would be stored without a username."""

    code = "empty_user_login"
    status_code = 400
    default_message = "Cannot create a user with an empty login name."


class ValueTooLongError(UserRepositoryError):
    """Raised when a field value exceeds the length the user store accepts.

    The code names the offending field, e.g. ``user_login_too_long``.
    """

    code = "user_value_too_long"
    status_code = 400
    default_message = "The value is too long."
