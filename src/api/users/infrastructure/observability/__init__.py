"""Domain-Oriented Observability for the Users infrastructure layer."""

from users.infrastructure.observability.repository_probe import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "DefaultUserRepositoryProbe",
    "UserRepositoryProbe",
]
