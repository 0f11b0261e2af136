"""Authorization gate over the role permission table"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi.responses import JSONResponse
from prometheus_client import Counter

from spark_rentals.core.exceptions import AuthorizationError
from spark_rentals.core.responses import exception_response
from spark_rentals.core.roles import Action, Resource, can, role_label

# Audit sink for every allow/deny decision.
logger = logging.getLogger("spark_rentals.rbac")

RBAC_DECISIONS = Counter(
    "spark_rbac_decisions_total",
    "Authorization decisions",
    ["resource", "action", "decision"],
)


@dataclass
class GateResult:
    ok: bool
    error: Optional[AuthorizationError] = None

    @property
    def response(self) -> Optional[JSONResponse]:
        return exception_response(self.error) if self.error else None


def _name(value: Any) -> str:
    return value.value if isinstance(value, (Resource, Action)) else str(value)


def log_decision(role: Any, resource: Any, action: Any, allowed: bool) -> None:
    decision = "ALLOWED" if allowed else "DENIED"
    logger.info(
        "[RBAC] role=%s action=%s resource=%s decision=%s",
        role_label(role),
        _name(action),
        _name(resource),
        decision,
    )
    RBAC_DECISIONS.labels(_name(resource), _name(action), decision).inc()


def require_permission(principal: Any, resource: Any, action: Any) -> GateResult:
    """
    Check the principal's role against the permission table.

    ``principal`` may be a Principal or anything exposing a ``role``
    attribute or key. Every call is logged.
    """
    if isinstance(principal, dict):
        role = principal.get("role")
    else:
        role = getattr(principal, "role", None)

    allowed = can(role, resource, action)
    log_decision(role, resource, action, allowed)
    if not allowed:
        return GateResult(ok=False, error=AuthorizationError())
    return GateResult(ok=True)
