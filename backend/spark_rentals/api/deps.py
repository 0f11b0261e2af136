"""API dependencies - authentication and authorization"""

from typing import Callable

from fastapi import Depends, Request

from spark_rentals.core.auth import require_auth
from spark_rentals.core.exceptions import AuthorizationError
from spark_rentals.core.rbac import require_permission
from spark_rentals.core.roles import Action, Resource
from spark_rentals.core.security import is_same_origin
from spark_rentals.core.tokens import Principal


async def get_current_principal(request: Request) -> Principal:
    """
    Authenticate the caller from header or cookie

    Raises:
        AuthenticationError: Missing, invalid or expired access token
    """
    result = require_auth(request)
    if not result.ok:
        raise result.error
    request.state.principal = result.principal
    return result.principal


def require_permission_dependency(resource: Resource, action: Action) -> Callable:
    """
    Use: Depends(require_permission_dependency(Resource.ADMIN, Action.READ))
    Authenticates, then checks the permission table.
    """

    async def _checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        result = require_permission(principal, resource, action)
        if not result.ok:
            raise result.error
        return principal

    return _checker


async def require_same_origin(request: Request) -> None:
    """Reject requests whose Origin does not match their Host."""
    if not is_same_origin(request.headers.get("origin"), request.headers.get("host")):
        raise AuthorizationError("Forbidden")
