"""
Component endpoints - runtime state of loaded triggers, receivers and relays
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_service_container
from api.middleware.auth import require_admin
from api.middleware.error_handler import ComponentNotFoundError, InvalidComponentKindError
from api.schemas.component import ComponentListResponse, ComponentResponse
from models.enums import ComponentKind
from services.service_container import ServiceContainer

router = APIRouter(prefix="/components", tags=["Components"])


def _parse_kind(kind: Optional[str]) -> Optional[ComponentKind]:
    if kind is None:
        return None
    for member in ComponentKind:
        if kind in (member.value, member.name, member.name.lower()):
            return member
    raise InvalidComponentKindError(kind, [k.value for k in ComponentKind])


@router.get(
    "",
    response_model=ComponentListResponse,
    summary="List loaded components",
)
async def list_components(
    kind: Optional[str] = Query(None, description="Filter by kind (e.g., 'receiver' or 'asset-link-receiver')"),
    services: ServiceContainer = Depends(get_service_container)
) -> ComponentListResponse:
    """
    **Errors:**
    - 422: unknown kind filter
    """
    described = services.plugin.describe_components(_parse_kind(kind))
    components = [ComponentResponse(**d) for d in described]
    return ComponentListResponse(components=components, count=len(components))


@router.get(
    "/{object_id}",
    response_model=ComponentResponse,
    summary="Get one component",
)
async def get_component(
    object_id: str,
    services: ServiceContainer = Depends(get_service_container)
) -> ComponentResponse:
    """
    **Errors:**
    - 404: no component is loaded on the object
    """
    component = services.plugin.get_component(object_id)
    if component is None:
        raise ComponentNotFoundError(object_id)
    return ComponentResponse(**component.describe())


@router.post(
    "/{object_id}/click",
    response_model=ComponentResponse,
    summary="Simulate a click on the object",
    dependencies=[Depends(require_admin)],
)
async def click_component(
    object_id: str,
    services: ServiceContainer = Depends(get_service_container)
) -> ComponentResponse:
    if not await services.plugin.click(object_id):
        raise ComponentNotFoundError(object_id)
    return ComponentResponse(**services.plugin.get_component(object_id).describe())
