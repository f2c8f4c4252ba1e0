"""
Base Pydantic schemas for request/response payloads.

Response models serialize with camelCase aliases. Request models accept
both camelCase and snake_case names and leave value checks to the domain
layer so that every failure comes back as a field-tagged ValidationError.
"""

from datetime import datetime, timezone
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Type variable for generic schemas
T = TypeVar('T')


class BaseSchema(BaseModel):
    """
    Base schema class with common configuration.

    This class provides common configuration and functionality
    that all schemas should inherit.
    """

    model_config = ConfigDict(
        # Enable validation of assignment
        validate_assignment=True,
        # Allow population by field name and alias
        populate_by_name=True,
        # Forbid extra fields by default (can be overridden)
        extra='forbid',
    )


class CamelCaseSchema(BaseSchema):
    """
    Base schema that converts field names to camelCase for JSON serialization.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RequestSchema(CamelCaseSchema):
    """Base for incoming payloads. Whitespace is kept, the domain trims."""


class PaginationMeta(CamelCaseSchema):
    """
    Schema for pagination metadata.

    Provides standardized pagination information in responses.
    """

    total: int = Field(
        ...,
        ge=0,
        description="Total number of items available",
        json_schema_extra={"example": 100}
    )
    limit: int = Field(
        ...,
        ge=1,
        description="Maximum number of items per page",
        json_schema_extra={"example": 20}
    )
    offset: int = Field(
        ...,
        ge=0,
        description="Number of items skipped",
        json_schema_extra={"example": 0}
    )
    has_more: bool = Field(
        ...,
        description="Whether there are more items after this page",
        json_schema_extra={"example": True}
    )
    current_page: int = Field(
        ...,
        ge=1,
        description="Current page number (1-based)",
        json_schema_extra={"example": 1}
    )
    total_pages: int = Field(
        ...,
        ge=0,
        description="Total number of pages, 0 when there are no items",
        json_schema_extra={"example": 5}
    )


class PaginatedResponse(CamelCaseSchema, Generic[T]):
    """
    Generic schema for paginated responses.

    Provides a standardized structure for paginated API responses.
    """

    data: List[T] = Field(
        ...,
        description="List of items for the current page"
    )
    pagination: PaginationMeta = Field(
        ...,
        description="Pagination metadata"
    )


class TimestampedResponse(CamelCaseSchema):
    """Response with creation and update timestamps."""

    created_at: datetime = Field(
        ...,
        description="Timestamp when the resource was created",
        json_schema_extra={"example": "2024-01-15T10:30:00Z"}
    )
    updated_at: datetime = Field(
        ...,
        description="Timestamp when the resource was last updated",
        json_schema_extra={"example": "2024-01-15T10:30:00Z"}
    )


class ErrorDetail(BaseSchema):
    """
    Schema for error details.

    Provides detailed information about validation or other errors.
    """

    field: Optional[str] = Field(
        default=None,
        description="Field name that caused the error (for validation errors)",
        json_schema_extra={"example": "email"}
    )
    message: str = Field(
        ...,
        description="Error message",
        json_schema_extra={"example": "Invalid email format"}
    )
    code: Optional[str] = Field(
        default=None,
        description="Error code for programmatic handling",
        json_schema_extra={"example": "VALIDATION_ERROR"}
    )


class ErrorResponse(BaseSchema):
    """
    Schema for error API responses.

    Provides a standardized structure for error responses.
    """

    success: bool = Field(
        default=False,
        description="Indicates if the request was successful"
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        json_schema_extra={"example": "Validation failed"}
    )
    error_code: Optional[str] = Field(
        default=None,
        description="Error code for programmatic handling",
        json_schema_extra={"example": "VALIDATION_ERROR"}
    )
    details: Optional[List[ErrorDetail]] = Field(
        default=None,
        description="Detailed error information"
    )
    correlation_id: Optional[str] = Field(
        default=None,
        description="Request correlation ID for tracking",
        json_schema_extra={"example": "abc123-def456-ghi789"}
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp of the error",
        json_schema_extra={"example": "2024-01-15T10:30:00Z"}
    )
