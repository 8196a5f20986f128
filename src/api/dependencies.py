"""
API Dependencies - Service container access for FastAPI endpoints

Pattern:
1. main_asyncio.py creates the ServiceContainer once the plugin is loaded
2. main_asyncio.py calls set_service_container()
3. Endpoints use the get_service_container() dependency via Depends()

Example:
    @router.get("/roles")
    async def get_roles(services: ServiceContainer = Depends(get_service_container)):
        return services.roles.assignments()
"""

from typing import Optional
from fastapi import HTTPException, status
from services.service_container import ServiceContainer


# Global service container (set by main_asyncio.py during initialization)
_service_container: Optional[ServiceContainer] = None


def set_service_container(services: Optional[ServiceContainer]) -> None:
    """Store the service container for API access (None clears it)"""
    global _service_container
    _service_container = services


async def get_service_container() -> ServiceContainer:
    """
    FastAPI dependency for accessing the service container

    Raises:
        HTTPException: 503 Service Unavailable if the plugin is not loaded yet
    """
    if _service_container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service container not initialized. Plugin may still be starting."
        )
    return _service_container
