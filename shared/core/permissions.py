"""Static role based access control.

Roles map to resource/action grants and to per-field visibility levels. The
tables are built once at import time and are read-only; every check is a
pure lookup.
"""
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from shared.utils.enums import FieldAccess, UserRole

WILDCARD = "*"

_ROLE_DEFINITIONS = {
    UserRole.ADMIN.value: {
        "description": "Full system access",
        "permissions": [
            ("skus", ("read", "create", "update", "delete")),
            ("inventory", ("read", "create", "update", "delete")),
            ("transactions", ("read", "create", "update", "delete")),
            ("users", ("read", "create", "update", "delete")),
            ("settings", ("read", "update")),
            ("logs", ("read", "create")),
        ],
    },
    UserRole.MANAGER.value: {
        "description": "Management access with limited user control",
        "permissions": [
            ("skus", ("read", "create", "update")),
            ("inventory", ("read", "create", "update")),
            ("transactions", ("read", "create", "update")),
            ("users", ("read",)),
            ("settings", ("read", "update")),
            ("logs", ("read",)),
        ],
    },
    UserRole.USER.value: {
        "description": "Standard user access",
        "permissions": [
            ("skus", ("read", "create", "update")),
            ("inventory", ("read", "update")),
            ("transactions", ("read", "create")),
            ("logs", ("read",)),
        ],
    },
    UserRole.VIEWER.value: {
        "description": "Read-only access",
        "permissions": [
            ("skus", ("read",)),
            ("inventory", ("read",)),
            ("transactions", ("read",)),
            ("logs", ("read",)),
        ],
    },
}

_FIELD_DEFINITIONS = {
    UserRole.ADMIN.value: {
        "skus": {WILDCARD: FieldAccess.WRITE},
        "inventory": {WILDCARD: FieldAccess.WRITE},
        "transactions": {WILDCARD: FieldAccess.WRITE},
        "users": {WILDCARD: FieldAccess.WRITE},
    },
    UserRole.MANAGER.value: {
        "skus": {WILDCARD: FieldAccess.WRITE},
        "inventory": {WILDCARD: FieldAccess.WRITE, "is_manual_cost": FieldAccess.READ},
        "transactions": {WILDCARD: FieldAccess.WRITE},
        "users": {WILDCARD: FieldAccess.READ},
    },
    UserRole.USER.value: {
        "skus": {WILDCARD: FieldAccess.WRITE, "created_at": FieldAccess.READ, "updated_at": FieldAccess.READ},
        "inventory": {WILDCARD: FieldAccess.READ, "quantity": FieldAccess.WRITE},
        "transactions": {WILDCARD: FieldAccess.WRITE, "created_by": FieldAccess.READ},
        "users": {WILDCARD: FieldAccess.HIDDEN},
    },
    UserRole.VIEWER.value: {
        "skus": {WILDCARD: FieldAccess.READ},
        "inventory": {WILDCARD: FieldAccess.READ},
        "transactions": {WILDCARD: FieldAccess.READ},
        "users": {WILDCARD: FieldAccess.HIDDEN},
    },
}


def _freeze_grants(definitions):
    return MappingProxyType({
        role: MappingProxyType({
            resource: frozenset(actions) for resource, actions in spec["permissions"]
        })
        for role, spec in definitions.items()
    })


def _freeze_fields(definitions):
    return MappingProxyType({
        role: MappingProxyType({
            resource: MappingProxyType({field: level.value for field, level in fields.items()})
            for resource, fields in resources.items()
        })
        for role, resources in definitions.items()
    })


ROLE_GRANTS: Mapping[str, Mapping[str, frozenset]] = _freeze_grants(_ROLE_DEFINITIONS)
FIELD_PERMISSIONS: Mapping[str, Mapping[str, Mapping[str, str]]] = _freeze_fields(_FIELD_DEFINITIONS)


def has_permission(role: str, resource: str, action: str) -> bool:
    grants = ROLE_GRANTS.get(role)
    if grants is None:
        return False
    return action in grants.get(resource, frozenset())


def get_role(name: str) -> Optional[Dict[str, Any]]:
    """Describe a role the way the role catalogue exposes it, or None."""
    spec = _ROLE_DEFINITIONS.get(name)
    if spec is None:
        return None
    return {
        "name": name,
        "description": spec["description"],
        "permissions": [
            {"resource": resource, "actions": list(actions)}
            for resource, actions in spec["permissions"]
        ],
    }


def list_roles() -> List[Dict[str, Any]]:
    return [get_role(name) for name in _ROLE_DEFINITIONS]


def field_visibility(role: str, resource: str) -> Dict[str, str]:
    """Configured field map for a role and resource.

    An empty dict means the role has no field rules for the resource and no
    filtering applies.
    """
    return dict(FIELD_PERMISSIONS.get(role, {}).get(resource, {}))


def field_permissions_for_role(role: str) -> List[Dict[str, Any]]:
    return [
        {"resource": resource, "fields": dict(fields)}
        for resource, fields in FIELD_PERMISSIONS.get(role, {}).items()
    ]


def field_permission(role: str, resource: str, field: str) -> Optional[str]:
    """Resolve one field: exact entry, then wildcard, then read."""
    fields = field_visibility(role, resource)
    if not fields:
        return None
    if field in fields:
        return fields[field]
    return fields.get(WILDCARD, FieldAccess.READ.value)


def filter_fields(data: Dict[str, Any], role: str, resource: str) -> Dict[str, Any]:
    """Drop the fields a role may not see."""
    if not field_visibility(role, resource):
        return data

    return {
        field: value for field, value in data.items()
        if field_permission(role, resource, field) != FieldAccess.HIDDEN.value
    }


def is_self_or_permitted(principal_id, target_user_id, role: str, resource: str, action: str) -> bool:
    # Owners always reach their own records, whatever their role
    if target_user_id is not None and str(principal_id) == str(target_user_id):
        return True
    return has_permission(role, resource, action)
