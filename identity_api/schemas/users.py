"""
User request and response schemas.

The password hash never appears in any response model.
"""

from typing import Optional

from pydantic import Field

from .base import RequestSchema, TimestampedResponse


class UserResponse(TimestampedResponse):
    """Public view of a user."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Email address", json_schema_extra={"example": "john@example.com"})
    first_name: str = Field(..., description="First name", json_schema_extra={"example": "John"})
    last_name: str = Field(..., description="Last name", json_schema_extra={"example": "Doe"})
    full_name: str = Field(..., description="First and last name", json_schema_extra={"example": "John Doe"})
    is_active: bool = Field(..., description="Whether the account can authenticate")
    role_id: str = Field(..., description="ID of the user's role")


class CreateUserRequest(RequestSchema):
    """Payload for creating a user with an explicit role."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Plaintext password, checked against the password policy")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    role_id: str = Field(..., description="Role to assign")


class UpdateUserRequest(RequestSchema):
    """
    Partial user update.

    Only fields that are present (not None) are applied.
    """

    email: Optional[str] = Field(default=None, description="New email address")
    password: Optional[str] = Field(default=None, description="New plaintext password")
    first_name: Optional[str] = Field(default=None, description="New first name")
    last_name: Optional[str] = Field(default=None, description="New last name")
    role_id: Optional[str] = Field(default=None, description="New role ID")
    is_active: Optional[bool] = Field(default=None, description="Activate or deactivate the account")
