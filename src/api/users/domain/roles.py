"""Role definitions and capability derivation.

Roles are named bundles of capabilities. A user's effective capabilities are
derived from the roles they hold plus their record-specific overrides; they
are never stored or assigned directly.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from users.domain.value_objects import Capability

_SUBSCRIBER = frozenset({Capability.READ.value})
_CONTRIBUTOR = _SUBSCRIBER | {"edit_posts", "delete_posts"}
_AUTHOR = _CONTRIBUTOR | {
    "upload_files",
    "publish_posts",
    "edit_published_posts",
    "delete_published_posts",
}
_EDITOR = _AUTHOR | {
    "moderate_comments",
    "manage_categories",
    "manage_links",
    "unfiltered_html",
    "edit_others_posts",
    "delete_others_posts",
    "edit_pages",
    "publish_pages",
    "delete_pages",
}
_ADMINISTRATOR = _EDITOR | {
    "manage_options",
    "switch_themes",
    "edit_theme_options",
    "activate_plugins",
    Capability.LIST_USERS.value,
    Capability.CREATE_USERS.value,
    Capability.EDIT_USERS.value,
    Capability.DELETE_USERS.value,
    Capability.PROMOTE_USERS.value,
    Capability.REMOVE_USERS.value,
    Capability.ADD_USERS.value,
}

ROLE_CAPABILITIES: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "administrator": frozenset(_ADMINISTRATOR),
        "editor": frozenset(_EDITOR),
        "author": frozenset(_AUTHOR),
        "contributor": frozenset(_CONTRIBUTOR),
        "subscriber": frozenset(_SUBSCRIBER),
    }
)


def derive_capabilities(
    roles: Iterable[str],
    direct_capabilities: Mapping[str, bool],
    role_capabilities: Mapping[str, frozenset[str]] = ROLE_CAPABILITIES,
) -> dict[str, bool]:
    """Compute effective capabilities for a set of roles and overrides.

    Role grants are applied first, then each held role name is itself set to
    True, then direct overrides are applied last so that an explicit False
    revokes a role-granted capability.

    Args:
        roles: Role names held by the user
        direct_capabilities: Record-specific capability overrides
        role_capabilities: Role definitions to resolve against

    Returns:
        Mapping of capability name to granted flag
    """
    effective: dict[str, bool] = {}
    for role in sorted(roles):
        for capability in sorted(role_capabilities.get(role, ())):
            effective[capability] = True
        effective[role] = True

    effective.update(direct_capabilities)
    return effective
