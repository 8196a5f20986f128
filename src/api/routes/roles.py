"""
Role endpoints - inspect and edit the role allow-list and assignments

Read access is public; edits require the admin token when one is configured.
"""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_service_container
from api.middleware.auth import require_admin
from api.middleware.error_handler import InvalidRoleError
from api.schemas.role import AssignRoleRequest, DefineRolesRequest, RolesResponse
from models.enums import LogCategory
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/roles", tags=["Roles"])


def _roles_response(services: ServiceContainer) -> RolesResponse:
    return RolesResponse(
        available_roles=list(services.roles.available_roles),
        assignments=services.roles.assignments(),
    )


@router.get("", response_model=RolesResponse, summary="Get roles")
async def get_roles(services: ServiceContainer = Depends(get_service_container)) -> RolesResponse:
    return _roles_response(services)


@router.put(
    "",
    response_model=RolesResponse,
    summary="Define the role allow-list",
    dependencies=[Depends(require_admin)],
)
async def define_roles(
    request: DefineRolesRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> RolesResponse:
    """
    Save the allow-list and broadcast the change to every component.

    Existing assignments are kept even if their role is no longer listed.
    """
    await services.plugin.define_roles(request.available_roles)
    log.info("Roles defined via API", roles=services.roles.available_roles_text)
    return _roles_response(services)


@router.post(
    "/assignments",
    response_model=RolesResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Grant a role to a user",
    dependencies=[Depends(require_admin)],
)
async def assign_role(
    request: AssignRoleRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> RolesResponse:
    """
    **Errors:**
    - 422: role is empty or not in the allow-list
    """
    role = request.role.strip()
    if not services.roles.is_valid(role):
        raise InvalidRoleError(role, list(services.roles.available_roles))

    await services.roles.assign(request.user_id, role)
    return _roles_response(services)


@router.delete(
    "",
    response_model=RolesResponse,
    summary="Clear all roles",
    dependencies=[Depends(require_admin)],
)
async def clear_roles(services: ServiceContainer = Depends(get_service_container)) -> RolesResponse:
    """Wipe every assignment and the allow-list"""
    await services.plugin.clear_all_roles()
    log.info("Roles cleared via API")
    return _roles_response(services)
