"""
System schemas - Pydantic models for task introspection
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class TaskResponse(BaseModel):
    """One tracked asyncio task"""
    id: int
    category: str = Field(description="Task category (e.g., 'RECEIVER')")
    description: str
    owner: Optional[str] = Field(None, description="Object ID owning the task")
    created_at: str
    status: str = Field(description="running, done, cancelled or failed")
    error: Optional[str] = None


class TaskListResponse(BaseModel):
    count: int
    tasks: List[TaskResponse]


class TaskSummaryResponse(BaseModel):
    summary: str = Field(description="Human-readable summary string")
    total: int
    active: int
    failed: int
    cancelled: int
