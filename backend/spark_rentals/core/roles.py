"""Role-based permission table"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


class Role(str, Enum):
    """User role enumeration (matches users.role)"""
    ADMIN = "ADMIN"
    OWNER = "OWNER"
    CUSTOMER = "CUSTOMER"


class Resource(str, Enum):
    USERS = "users"
    ADMIN = "admin"
    FILES = "files"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


_ALL = (Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE)

# Each role is enumerated in full; there is no inheritance between roles.
ROLE_PERMISSIONS: Mapping[Role, Mapping[Resource, Tuple[Action, ...]]] = MappingProxyType({
    Role.ADMIN: MappingProxyType({
        Resource.USERS: _ALL,
        Resource.ADMIN: _ALL,
        Resource.FILES: _ALL,
    }),
    Role.OWNER: MappingProxyType({
        Resource.USERS: (Action.CREATE, Action.READ, Action.UPDATE),
        Resource.ADMIN: (),
        Resource.FILES: (Action.CREATE, Action.READ),
    }),
    Role.CUSTOMER: MappingProxyType({
        Resource.USERS: (Action.READ,),
        Resource.ADMIN: (),
        Resource.FILES: (Action.CREATE, Action.READ),
    }),
})

# Two-level lookup sets built once at import.
_PERMISSION_SETS = {
    role: {resource: frozenset(actions) for resource, actions in table.items()}
    for role, table in ROLE_PERMISSIONS.items()
}


def parse_role(value: Any) -> Optional[Role]:
    """
    Normalize arbitrary input to a known role.

    Accepts Role members, their names in any case, and the "Role.ADMIN"
    spelling some clients send. Anything else returns None.
    """
    if isinstance(value, Role):
        return value
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return None

    name = value.strip().upper()
    if name.startswith("ROLE."):
        name = name[len("ROLE."):]
    try:
        return Role(name)
    except ValueError:
        return None


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


def can(role: Any, resource: Any, action: Any) -> bool:
    """True when the role's permission set contains (resource, action)."""
    normalized = parse_role(role)
    if normalized is None:
        return False
    resource_ = _coerce(Resource, resource)
    action_ = _coerce(Action, action)
    if resource_ is None or action_ is None:
        return False
    return action_ in _PERMISSION_SETS[normalized][resource_]


def permissions_for(role: Any) -> dict:
    """Resource -> list of permitted action names for a role (empty for unknown roles)."""
    normalized = parse_role(role)
    if normalized is None:
        return {resource.value: [] for resource in Resource}
    return {
        resource.value: [action.value for action in actions]
        for resource, actions in ROLE_PERMISSIONS[normalized].items()
    }


def role_label(role: Any) -> str:
    normalized = parse_role(role)
    return normalized.value if normalized else "UNKNOWN"
