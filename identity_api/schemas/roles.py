"""Role request and response schemas."""

from typing import List, Optional

from pydantic import Field

from .base import RequestSchema, TimestampedResponse


class RoleResponse(TimestampedResponse):
    """Public view of a role."""

    id: str = Field(..., description="Role ID")
    name: str = Field(..., description="Uppercase role name", json_schema_extra={"example": "EDITOR"})
    description: str = Field(..., description="Role description")
    is_system: bool = Field(..., description="System roles cannot be edited or deleted")
    permission_ids: List[str] = Field(default_factory=list, description="IDs of granted permissions")


class CreateRoleRequest(RequestSchema):
    """Payload for creating a custom role."""

    name: str = Field(..., description="Role name, stored uppercased")
    description: str = Field(..., description="Role description")
    permission_ids: List[str] = Field(default_factory=list, description="Permissions to grant")


class UpdateRoleRequest(RequestSchema):
    """Partial role update. ``permission_ids`` replaces the whole set."""

    name: Optional[str] = Field(default=None, description="New role name")
    description: Optional[str] = Field(default=None, description="New description")
    permission_ids: Optional[List[str]] = Field(default=None, description="Replacement permission set")
