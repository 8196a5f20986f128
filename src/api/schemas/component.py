"""
Component schemas - Pydantic models for loaded component introspection
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List


class ComponentResponse(BaseModel):
    """One loaded component and its runtime state"""
    object_id: str = Field(description="Host object the component is attached to")
    kind: str = Field(description="Component kind (e.g., 'asset-link-receiver')")
    fields: Dict[str, Any] = Field(description="Raw settings fields")
    state: Dict[str, Any] = Field(description="Runtime state (phase, current state, ...)")

    class Config:
        json_schema_extra = {
            "example": {
                "object_id": "door-01",
                "kind": "asset-link-receiver",
                "fields": {"actionID": "door", "animationMode": "Transition"},
                "state": {"phase": "IDLE", "current_state": "closed"}
            }
        }


class ComponentListResponse(BaseModel):
    """List of loaded components"""
    components: List[ComponentResponse]
    count: int = Field(description="Number of components")
