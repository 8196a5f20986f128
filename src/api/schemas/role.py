"""
Role schemas - Pydantic models for the role allow-list and assignments
"""

from pydantic import BaseModel, Field
from typing import Dict, List


class RolesResponse(BaseModel):
    """Current allow-list and per-user assignments"""
    available_roles: List[str] = Field(description="Roles that may be granted")
    assignments: Dict[str, List[str]] = Field(description="User ID -> granted roles")

    class Config:
        json_schema_extra = {
            "example": {
                "available_roles": ["guard", "visitor"],
                "assignments": {"user-42": ["visitor"]}
            }
        }


class DefineRolesRequest(BaseModel):
    """Replace the allow-list (comma-separated, whitespace trimmed)"""
    available_roles: str = Field(
        description="Comma-separated role names, e.g. 'guard, visitor'"
    )


class AssignRoleRequest(BaseModel):
    """Grant a role to a user"""
    user_id: str = Field(min_length=1, description="Host user ID")
    role: str = Field(description="Role name from the allow-list")
