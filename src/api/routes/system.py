"""
System endpoints - Task introspection and monitoring
"""

from fastapi import APIRouter, Depends
from typing import List

from api.dependencies import get_service_container
from api.schemas.system import TaskListResponse, TaskResponse, TaskSummaryResponse
from lifecycle.task_registry import TaskRecord
from services.service_container import ServiceContainer

router = APIRouter(prefix="/system", tags=["System"])


def _task_response(r: TaskRecord) -> TaskResponse:
    return TaskResponse(
        id=r.info.id,
        category=r.info.category.name,
        description=r.info.description,
        owner=r.info.owner,
        created_at=r.info.created_at,
        status=r.status,
        error=str(r.finished_with_error) if r.finished_with_error else None,
    )


def _task_list(records: List[TaskRecord]) -> TaskListResponse:
    tasks = [_task_response(r) for r in records]
    return TaskListResponse(count=len(tasks), tasks=tasks)


@router.get("/tasks/summary", response_model=TaskSummaryResponse)
async def get_task_summary(
    services: ServiceContainer = Depends(get_service_container)
) -> TaskSummaryResponse:
    """
    Get high-level task summary.

    Returns:
        - summary: Human-readable summary string
        - total: Total tasks tracked (bounded history)
        - active: Currently running tasks
        - failed: Tasks that ended with exceptions
        - cancelled: Tasks that were cancelled
    """
    registry = services.task_registry
    return TaskSummaryResponse(
        summary=registry.summary(),
        total=len(registry.list_all()),
        active=len(registry.active()),
        failed=len(registry.failed()),
        cancelled=len(registry.cancelled()),
    )


@router.get("/tasks", response_model=TaskListResponse)
async def get_all_tasks(
    services: ServiceContainer = Depends(get_service_container)
) -> TaskListResponse:
    """Get detailed information about all tracked tasks."""
    return _task_list(services.task_registry.list_all())


@router.get("/tasks/active", response_model=TaskListResponse)
async def get_active_tasks(
    services: ServiceContainer = Depends(get_service_container)
) -> TaskListResponse:
    """
    Get only currently running tasks.

    Useful for debugging hangs or identifying what's blocking shutdown.
    """
    records = sorted(services.task_registry.active(), key=lambda r: r.info.created_timestamp)
    return _task_list(records)


@router.get("/tasks/failed", response_model=TaskListResponse)
async def get_failed_tasks(
    services: ServiceContainer = Depends(get_service_container)
) -> TaskListResponse:
    """Get tasks that ended with exceptions."""
    return _task_list(services.task_registry.failed())
