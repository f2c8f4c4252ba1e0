"""Authentication request and response schemas."""

from pydantic import Field

from .base import CamelCaseSchema, RequestSchema
from .users import UserResponse


class RegisterRequest(RequestSchema):
    """Self-service registration. The user gets the default role."""

    email: str = Field(..., description="Email address", json_schema_extra={"example": "john@example.com"})
    password: str = Field(..., description="Plaintext password", json_schema_extra={"example": "Str0ng!Pass"})
    first_name: str = Field(..., description="First name", json_schema_extra={"example": "John"})
    last_name: str = Field(..., description="Last name", json_schema_extra={"example": "Doe"})


class LoginRequest(RequestSchema):
    """Credentials for login."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Plaintext password")


class LoginResponse(CamelCaseSchema):
    """Bearer token plus the authenticated user."""

    access_token: str = Field(..., description="Signed bearer token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserResponse = Field(..., description="Authenticated user")
