"""Domain-Oriented Observability for the Users application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from users.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from users.application.observability.authorization_gate_probe import (
    AuthorizationGateProbe,
    DefaultAuthorizationGateProbe,
)
from users.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "AuthenticationProbe",
    "DefaultAuthenticationProbe",
    "AuthorizationGateProbe",
    "DefaultAuthorizationGateProbe",
    "UserServiceProbe",
    "DefaultUserServiceProbe",
]
