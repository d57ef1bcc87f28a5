"""Authorization type definitions for capability checks.

Defines resource types and identifier formatting shared by every caller of
the authorization provider. These helpers keep resource and subject strings
consistent across bounded contexts.
"""

from enum import StrEnum

WILDCARD = "*"


class ResourceType(StrEnum):
    """Resource types that capabilities can be scoped to."""

    USER = "user"
    # Future: POST, COMMENT, etc.


def format_resource(resource_type: ResourceType, resource_id: str | int | None) -> str:
    """Format a resource identifier for a capability check.

    A ``None`` resource id denotes "any resource of this type" and is
    rendered with the wildcard.

    Args:
        resource_type: The type of resource
        resource_id: The identifier of the resource, or None for any

    Returns:
        Formatted resource string (e.g., "user:7" or "user:*")

    Example:
        >>> format_resource(ResourceType.USER, 7)
        "user:7"
    """
    if resource_id is None:
        resource_id = WILDCARD
    return f"{resource_type}:{resource_id}"


def format_subject(subject_type: ResourceType, subject_id: str | int) -> str:
    """Format a subject identifier for a capability check.

    Args:
        subject_type: The type of subject (usually USER)
        subject_id: The unique identifier for the subject

    Returns:
        Formatted subject string (e.g., "user:3")
    """
    return f"{subject_type}:{subject_id}"


def parse_resource(resource: str) -> tuple[str, str | None]:
    """Split a formatted resource string into its type and id.

    The wildcard id is returned as ``None``.

    Raises:
        ValueError: If the string is not of the form ``type:id``
    """
    resource_type, sep, resource_id = resource.partition(":")
    if not sep or not resource_type or not resource_id:
        raise ValueError(f"Malformed resource identifier: {resource!r}")
    if resource_id == WILDCARD:
        return resource_type, None
    return resource_type, resource_id
