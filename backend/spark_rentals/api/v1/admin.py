"""Admin routes"""

from fastapi import APIRouter, Depends

from spark_rentals.api.deps import require_permission_dependency
from spark_rentals.core.responses import success_response
from spark_rentals.core.roles import Action, Resource
from spark_rentals.core.tokens import Principal

router = APIRouter()


@router.get("")
def admin_home(
    principal: Principal = Depends(require_permission_dependency(Resource.ADMIN, Action.READ)),
):
    """
    Admin landing endpoint (requires admin:read)

    The edge interceptor already checked the same permission; this is the
    per-route layer.
    """
    return success_response(
        {"message": "Welcome Admin! You have full access.", "email": principal.email},
        "Admin access granted",
    )
