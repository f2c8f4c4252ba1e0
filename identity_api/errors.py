"""
Error taxonomy shared by the domain and use-case layers.

These errors are returned inside ``Err`` results rather than raised.
Each carries a machine-readable code and the HTTP status an adapter
should map it to. ``metadata`` is for logs only and is never serialized.
"""

from typing import Any, Dict, List, Optional


class IdentityError(Exception):
    """Base class for expected identity failures."""

    error_code = "IDENTITY_ERROR"
    http_status = 500

    def __init__(self, message: str, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.metadata: Dict[str, Any] = dict(metadata or {})

    def to_dict(self) -> Dict[str, Any]:
        """Client-safe representation of the error."""
        return {
            "error_code": self.error_code,
            "message": self.message,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ValidationError(IdentityError):
    """A value failed a business rule. Always tagged with the field."""

    error_code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, field: str, reason: str, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(f"Validation failed for '{field}': {reason}", metadata)
        self.field = field
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field": self.field, "reason": self.reason}


class NotFoundError(IdentityError):
    """Referenced entity does not exist."""

    error_code = "NOT_FOUND"
    http_status = 404

    def __init__(
        self,
        entity_type: str,
        identifier: str,
        metadata: Optional[Dict[str, Any]] = None,
        missing_ids: Optional[List[str]] = None,
    ):
        super().__init__(f"{entity_type} with identifier '{identifier}' not found", metadata)
        self.entity_type = entity_type
        self.identifier = identifier
        self.missing_ids = list(missing_ids or [])

    def to_dict(self) -> Dict[str, Any]:
        data = {**super().to_dict(), "entity_type": self.entity_type, "identifier": self.identifier}
        if self.missing_ids:
            data["missing_ids"] = list(self.missing_ids)
        return data


class ConflictError(IdentityError):
    """A unique field is already taken."""

    error_code = "CONFLICT"
    http_status = 409

    def __init__(
        self,
        entity_type: str,
        field: str,
        value: str,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message or f"{entity_type} with {field} '{value}' already exists", metadata)
        self.entity_type = entity_type
        self.field = field
        self.value = value

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "entity_type": self.entity_type,
            "field": self.field,
            "value": self.value,
        }


class ForbiddenError(IdentityError):
    """Operation is not allowed on this entity."""

    error_code = "FORBIDDEN"
    http_status = 403

    def __init__(
        self,
        operation: str,
        entity_type: str,
        reason: str,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(reason, metadata)
        self.operation = operation
        self.entity_type = entity_type
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "operation": self.operation,
            "entity_type": self.entity_type,
        }


class UnauthorizedError(IdentityError):
    """
    Authentication failed.

    The public message stays generic. Anything that tells the caller why
    (unknown email, inactive account, wrong password) goes to ``metadata``.
    """

    error_code = "UNAUTHORIZED"
    http_status = 401

    def __init__(self, message: str = "Invalid credentials", metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message, metadata)


class DatabaseError(IdentityError):
    """Opaque persistence failure."""

    error_code = "DATABASE_ERROR"
    http_status = 500

    def __init__(
        self,
        message: str = "Database operation failed",
        cause: Optional[BaseException] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, metadata)
        self.cause = cause
