import json
import logging

import pytest

from spark_rentals.core.rbac import require_permission
from spark_rentals.core.roles import (
    ROLE_PERMISSIONS,
    Action,
    Resource,
    Role,
    can,
    parse_role,
    permissions_for,
)
from spark_rentals.core.tokens import Principal

EXPECTED = {
    "ADMIN": {
        "users": {"create", "read", "update", "delete"},
        "admin": {"create", "read", "update", "delete"},
        "files": {"create", "read", "update", "delete"},
    },
    "OWNER": {
        "users": {"create", "read", "update"},
        "admin": set(),
        "files": {"create", "read"},
    },
    "CUSTOMER": {
        "users": {"read"},
        "admin": set(),
        "files": {"create", "read"},
    },
}


def test_can_matches_table_for_every_combination():
    for role in Role:
        for resource in Resource:
            for action in Action:
                expected = action.value in EXPECTED[role.value][resource.value]
                assert can(role, resource, action) is expected, (role, resource, action)
                assert can(role.value.lower(), resource.value, action.value) is expected


@pytest.mark.parametrize("role", [None, "", "superuser", 3, True, object(), "ADMINS"])
def test_unrecognized_role_denied_everywhere(role):
    assert parse_role(role) is None
    for resource in Resource:
        for action in Action:
            assert can(role, resource, action) is False


@pytest.mark.parametrize(
    "value,expected",
    [
        ("admin", Role.ADMIN),
        (" Owner ", Role.OWNER),
        ("customer", Role.CUSTOMER),
        (Role.ADMIN, Role.ADMIN),
        ("Role.ADMIN", Role.ADMIN),
    ],
)
def test_parse_role_normalizes(value, expected):
    assert parse_role(value) is expected


def test_unknown_resource_or_action_denied():
    assert can("ADMIN", "bookings", "read") is False
    assert can("ADMIN", "users", "archive") is False


def test_admin_permissions_are_enumerated_not_inherited():
    assert set(ROLE_PERMISSIONS[Role.ADMIN][Resource.ADMIN]) == set(Action)
    assert Action.DELETE not in ROLE_PERMISSIONS[Role.OWNER][Resource.USERS]


def test_permissions_for_unknown_role_is_empty():
    assert permissions_for("nobody") == {"users": [], "admin": [], "files": []}
    assert permissions_for("CUSTOMER")["files"] == ["create", "read"]


def test_owner_denied_admin_read():
    result = require_permission(Principal(id=2, email="o@example.com", role=Role.OWNER), "admin", "read")
    assert result.ok is False
    assert result.response.status_code == 403
    body = json.loads(result.response.body)
    assert body["success"] is False
    assert body["message"] == "Access denied: insufficient permissions."
    assert body["error"]["code"] == "E006"


def test_customer_allowed_users_read():
    result = require_permission({"role": "CUSTOMER"}, Resource.USERS, Action.READ)
    assert result.ok is True
    assert result.response is None


def test_every_decision_is_logged(caplog):
    caplog.set_level(logging.INFO, logger="spark_rentals.rbac")
    require_permission({"role": "CUSTOMER"}, "users", "read")
    require_permission({"role": "mystery"}, "admin", "delete")

    lines = [r.getMessage() for r in caplog.records if r.name == "spark_rentals.rbac"]
    assert lines == [
        "[RBAC] role=CUSTOMER action=read resource=users decision=ALLOWED",
        "[RBAC] role=UNKNOWN action=delete resource=admin decision=DENIED",
    ]
