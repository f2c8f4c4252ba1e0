"""Permission request and response schemas."""

from typing import Optional

from pydantic import Field

from .base import CamelCaseSchema, RequestSchema, TimestampedResponse


class PermissionResponse(TimestampedResponse):
    """Public view of a permission. ``updated_at`` mirrors ``created_at``."""

    id: str = Field(..., description="Permission ID")
    resource: str = Field(..., description="Resource token or *", json_schema_extra={"example": "users"})
    action: str = Field(..., description="Action token or *", json_schema_extra={"example": "read"})
    description: str = Field(..., description="Permission description")


class CreatePermissionRequest(RequestSchema):
    """Payload for creating a permission."""

    resource: str = Field(..., description="Resource token or *")
    action: str = Field(..., description="Action token or *")
    description: str = Field(..., description="Permission description")


class UpdatePermissionRequest(RequestSchema):
    """Only the description of a permission can change."""

    description: Optional[str] = Field(default=None, description="New description")


class PermissionCheckResponse(CamelCaseSchema):
    """Outcome of a single authorization check."""

    user_id: str = Field(..., description="Checked user")
    resource: str = Field(..., description="Requested resource")
    action: str = Field(..., description="Requested action")
    allowed: bool = Field(..., description="Whether the user may perform the action")
