"""
Role aggregate.

A role bundles permission ids. It references permissions, it does not
own them.
"""

import re
from datetime import datetime
from typing import Iterable, List, Optional

from identity_api.domain.entities.base import _CONSTRUCTION_KEY, AggregateRoot, utc_now
from identity_api.domain.entities.permission import validate_description
from identity_api.domain.value_objects import PermissionId, RoleId
from identity_api.errors import ValidationError
from identity_api.result import Err, Ok, Result


ROLE_NAME_PATTERN = re.compile(r"^[A-Z0-9_]+$")
MAX_NAME_LENGTH = 50


def normalize_role_name(name: Optional[str]) -> str:
    """Role names compare case-insensitively through uppercasing."""
    return (name or "").strip().upper()


def validate_role_name(name: Optional[str]) -> Result[str, ValidationError]:
    normalized = normalize_role_name(name)

    if not normalized:
        return Err(ValidationError("name", "Role name cannot be empty"))

    if len(normalized) > MAX_NAME_LENGTH:
        return Err(ValidationError("name", f"Role name cannot exceed {MAX_NAME_LENGTH} characters"))

    if not ROLE_NAME_PATTERN.match(normalized):
        return Err(ValidationError(
            "name", "Role name can only contain uppercase letters, numbers and underscores"
        ))

    return Ok(normalized)


def _check_duplicates(permission_ids: List[PermissionId]) -> Result[None, ValidationError]:
    if len(set(permission_ids)) != len(permission_ids):
        return Err(ValidationError("permissionIds", "Duplicate permission IDs are not allowed"))
    return Ok(None)


class Role(AggregateRoot):
    """Named permission bundle."""

    def __init__(
        self,
        key: object,
        role_id: RoleId,
        name: str,
        description: str,
        is_system: bool,
        permission_ids: List[PermissionId],
        created_at: datetime,
        updated_at: datetime,
    ):
        super().__init__(key, role_id, created_at)
        self._name = name
        self._description = description
        self._is_system = is_system
        self._permission_ids = list(permission_ids)
        self._updated_at = updated_at

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        permission_ids: Optional[Iterable[PermissionId]] = None,
        is_system: bool = False,
    ) -> Result["Role", ValidationError]:
        """
        Create a new role.

        Args:
            name: Role name, stored uppercased
            description: Human-readable description
            permission_ids: Initial permissions, must not repeat
            is_system: Only the seeder creates system roles

        Returns:
            Ok(Role) or the first Err(ValidationError)
        """
        name_result = validate_role_name(name)
        if name_result.is_err():
            return name_result

        description_result = validate_description(description)
        if description_result.is_err():
            return description_result

        ids = list(permission_ids or [])
        duplicates = _check_duplicates(ids)
        if duplicates.is_err():
            return duplicates

        now = utc_now()
        return Ok(cls(
            _CONSTRUCTION_KEY,
            RoleId.create(),
            name_result.value,
            description_result.value,
            is_system,
            ids,
            now,
            now,
        ))

    @classmethod
    def reconstitute(
        cls,
        role_id: RoleId,
        name: str,
        description: str,
        is_system: bool,
        permission_ids: Iterable[PermissionId],
        created_at: datetime,
        updated_at: datetime,
    ) -> "Role":
        """Rebuild a stored role without validation. The id list is copied."""
        return cls(
            _CONSTRUCTION_KEY,
            role_id,
            name,
            description,
            is_system,
            list(permission_ids),
            created_at,
            updated_at,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def is_system(self) -> bool:
        return self._is_system

    @property
    def permission_ids(self) -> List[PermissionId]:
        return list(self._permission_ids)

    @property
    def permission_count(self) -> int:
        return len(self._permission_ids)

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def has_permission(self, permission_id: PermissionId) -> bool:
        return permission_id in self._permission_ids

    def assign_permission(self, permission_id: PermissionId) -> Result[None, ValidationError]:
        if self.has_permission(permission_id):
            return Err(ValidationError("permissionId", "Permission already assigned to this role"))
        self._permission_ids.append(permission_id)
        self._touch()
        return Ok(None)

    def remove_permission(self, permission_id: PermissionId) -> Result[None, ValidationError]:
        if not self.has_permission(permission_id):
            return Err(ValidationError("permissionId", "Permission not found in this role"))
        self._permission_ids.remove(permission_id)
        self._touch()
        return Ok(None)

    def replace_permissions(self, permission_ids: Iterable[PermissionId]) -> Result[None, ValidationError]:
        """
        Replace the whole permission set.

        ``updated_at`` only moves when the set actually changes.

        Args:
            permission_ids: New permission set, must not repeat

        Returns:
            Ok(None) or Err(ValidationError) on duplicates
        """
        ids = list(permission_ids)
        duplicates = _check_duplicates(ids)
        if duplicates.is_err():
            return duplicates

        if set(ids) != set(self._permission_ids):
            self._permission_ids = ids
            self._touch()
        return Ok(None)

    def change_name(self, name: str) -> Result[None, ValidationError]:
        result = validate_role_name(name)
        if result.is_err():
            return result
        self._name = result.value
        self._touch()
        return Ok(None)

    def change_description(self, description: str) -> Result[None, ValidationError]:
        result = validate_description(description)
        if result.is_err():
            return result
        self._description = result.value
        self._touch()
        return Ok(None)

    def _touch(self) -> None:
        self._updated_at = utc_now()

    def __repr__(self) -> str:
        return f"Role(id={self._id.value!r}, name={self._name!r}, is_system={self._is_system})"
