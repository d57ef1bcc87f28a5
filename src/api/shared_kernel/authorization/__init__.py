"""Authorization primitives for capability-based access control.

This module provides shared authorization types and abstractions used across
bounded contexts.
"""

from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import (
    WILDCARD,
    ResourceType,
    format_resource,
    format_subject,
    parse_resource,
)

__all__ = [
    "AuthorizationProvider",
    "ResourceType",
    "WILDCARD",
    "format_resource",
    "format_subject",
    "parse_resource",
]
