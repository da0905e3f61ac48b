"""
Admin roles, capabilities and the permission decision.

Permission maps are deny-lists: a capability missing from an admin's map is
GRANTED. Only an explicit ``False`` takes a capability away. Do not flip this
to default-deny; capabilities added later must stay available to existing
admins until a superadmin disables them.

Managing admin accounts and their permissions is not a capability. It is
reserved to the superadmin role so that no permission-bearing admin can grant
itself more.
"""
from collections.abc import Mapping
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Capability(str, Enum):
    """Admin management areas that can be toggled per admin."""

    PRODUCTS = "products"
    INTERESTS = "interests"
    TRAFFIC = "traffic"
    ANNOUNCEMENTS = "announcements"


PermissionMap = dict[Capability, bool]


def decide(role: Role | str, permissions: Mapping[str, bool] | None, capability: Capability) -> bool:
    if Role(role) is Role.SUPERADMIN:
        return True
    if not permissions:
        return True
    # Stored maps are keyed by plain strings (JSON column)
    return bool(permissions.get(capability.value, True))


def normalize_permissions(permissions: Mapping[Capability | str, bool] | None) -> dict[str, bool]:
    """
    Validates and flattens a permission map for storage.

    Unknown capability names raise ValueError instead of being stored, where
    they would otherwise read as "allowed".
    """
    if not permissions:
        return {}
    return {Capability(key).value: bool(value) for key, value in permissions.items()}


def effective_permissions(role: Role | str, permissions: Mapping[str, bool] | None) -> dict[str, bool]:
    """Every capability with its resolved value, as shown to clients."""
    return {cap.value: decide(role, permissions, cap) for cap in Capability}
