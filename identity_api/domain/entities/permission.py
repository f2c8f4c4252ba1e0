"""
Permission aggregate.

A permission is a ``resource:action`` grant descriptor. Either part may
be the ``*`` wildcard.
"""

import re
from datetime import datetime
from typing import Optional

from identity_api.domain.entities.base import _CONSTRUCTION_KEY, AggregateRoot, utc_now
from identity_api.domain.value_objects import PermissionId
from identity_api.errors import ValidationError
from identity_api.result import Err, Ok, Result


WILDCARD = "*"
TOKEN_PATTERN = re.compile(r"^[a-z0-9_-]+$", re.IGNORECASE)
MAX_TOKEN_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 255


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def validate_token(field: str, value: Optional[str]) -> Result[str, ValidationError]:
    """
    Validate a resource or action token.

    Args:
        field: ``resource`` or ``action``
        value: Raw token

    Returns:
        Ok with the lowercased token, or Err(ValidationError)
    """
    label = field.capitalize()
    normalized = _normalize(value)

    if not normalized:
        return Err(ValidationError(field, f"{label} cannot be empty"))

    if len(normalized) > MAX_TOKEN_LENGTH:
        return Err(ValidationError(field, f"{label} cannot exceed {MAX_TOKEN_LENGTH} characters"))

    if normalized != WILDCARD and not TOKEN_PATTERN.match(normalized):
        return Err(ValidationError(
            field,
            f"{label} can only contain lowercase letters, numbers, underscores and hyphens",
        ))

    return Ok(normalized)


def validate_description(value: Optional[str]) -> Result[str, ValidationError]:
    """Validate a permission or role description."""
    description = (value or "").strip()

    if not description:
        return Err(ValidationError("description", "Description cannot be empty"))

    if len(description) > MAX_DESCRIPTION_LENGTH:
        return Err(ValidationError(
            "description", f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
        ))

    return Ok(description)


class Permission(AggregateRoot):
    """Grant descriptor. Resource and action never change after creation."""

    def __init__(
        self,
        key: object,
        permission_id: PermissionId,
        resource: str,
        action: str,
        description: str,
        created_at: datetime,
    ):
        super().__init__(key, permission_id, created_at)
        self._resource = resource
        self._action = action
        self._description = description

    @classmethod
    def create(
        cls,
        resource: str,
        action: str,
        description: str,
    ) -> Result["Permission", ValidationError]:
        """
        Create a new permission.

        Args:
            resource: Resource token, e.g. ``users`` or ``*``
            action: Action token, e.g. ``read`` or ``*``
            description: Human-readable description

        Returns:
            Ok(Permission) or the first Err(ValidationError)
        """
        resource_result = validate_token("resource", resource)
        if resource_result.is_err():
            return resource_result

        action_result = validate_token("action", action)
        if action_result.is_err():
            return action_result

        description_result = validate_description(description)
        if description_result.is_err():
            return description_result

        return Ok(cls(
            _CONSTRUCTION_KEY,
            PermissionId.create(),
            resource_result.value,
            action_result.value,
            description_result.value,
            utc_now(),
        ))

    @classmethod
    def reconstitute(
        cls,
        permission_id: PermissionId,
        resource: str,
        action: str,
        description: str,
        created_at: datetime,
    ) -> "Permission":
        """Rebuild a stored permission without validation."""
        return cls(_CONSTRUCTION_KEY, permission_id, resource, action, description, created_at)

    @property
    def resource(self) -> str:
        return self._resource

    @property
    def action(self) -> str:
        return self._action

    @property
    def description(self) -> str:
        return self._description

    @property
    def code(self) -> str:
        """``resource:action`` form of the permission."""
        return f"{self._resource}:{self._action}"

    @property
    def is_wildcard(self) -> bool:
        return WILDCARD in (self._resource, self._action)

    def grants(self, resource: str, action: str) -> bool:
        """
        Check whether this permission allows ``action`` on ``resource``.

        Flat wildcard rules: exact match, ``resource:*``, ``*:action`` and
        ``*:*``. There is no hierarchical matching.

        Args:
            resource: Requested resource
            action: Requested action

        Returns:
            True if the permission grants the pair
        """
        requested_resource = _normalize(resource)
        requested_action = _normalize(action)

        resource_matches = self._resource == WILDCARD or self._resource == requested_resource
        action_matches = self._action == WILDCARD or self._action == requested_action
        return resource_matches and action_matches

    def matches(self, resource: str, action: str) -> bool:
        """Exact comparison, wildcards are literal."""
        return self._resource == _normalize(resource) and self._action == _normalize(action)

    def update_description(self, description: str) -> Result[None, ValidationError]:
        result = validate_description(description)
        if result.is_err():
            return result
        self._description = result.value
        return Ok(None)

    def __repr__(self) -> str:
        return f"Permission(id={self._id.value!r}, code={self.code!r})"
