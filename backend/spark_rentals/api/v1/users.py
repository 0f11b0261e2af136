"""User-facing routes"""

from fastapi import APIRouter, Depends

from spark_rentals.api.deps import require_permission_dependency
from spark_rentals.core.responses import success_response
from spark_rentals.core.roles import Action, Resource, permissions_for
from spark_rentals.core.tokens import Principal

router = APIRouter()


@router.get("/me/permissions")
def my_permissions(
    principal: Principal = Depends(require_permission_dependency(Resource.USERS, Action.READ)),
):
    """Permission map for the caller's role"""
    return success_response(
        {
            "id": principal.id,
            "role": principal.role.value if principal.role else None,
            "permissions": permissions_for(principal.role),
        },
        "Permissions fetched",
    )
