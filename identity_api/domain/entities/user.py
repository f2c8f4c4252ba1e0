"""
User aggregate.

The user holds a hashed password and exactly one role reference.
"""

import re
from datetime import datetime
from typing import Optional

from identity_api.domain.entities.base import _CONSTRUCTION_KEY, AggregateRoot, utc_now
from identity_api.domain.value_objects import Email, Password, RoleId, UserId
from identity_api.errors import ValidationError
from identity_api.result import Err, Ok, Result


NAME_PATTERN = re.compile(r"^[a-zA-Z\s'-]+$")
MAX_NAME_LENGTH = 100


def validate_name(field: str, label: str, value: Optional[str]) -> Result[str, ValidationError]:
    """
    Validate a first or last name.

    Args:
        field: Error field tag
        label: Human label used in messages
        value: Raw name

    Returns:
        Ok with the trimmed name, or Err(ValidationError)
    """
    name = (value or "").strip()

    if not name:
        return Err(ValidationError(field, f"{label} cannot be empty"))

    if len(name) > MAX_NAME_LENGTH:
        return Err(ValidationError(field, f"{label} cannot exceed {MAX_NAME_LENGTH} characters"))

    if not NAME_PATTERN.match(name):
        return Err(ValidationError(
            field, f"{label} can only contain letters, spaces, hyphens and apostrophes"
        ))

    return Ok(name)


class User(AggregateRoot):
    """Authenticatable account."""

    def __init__(
        self,
        key: object,
        user_id: UserId,
        email: Email,
        password: Password,
        first_name: str,
        last_name: str,
        is_active: bool,
        role_id: RoleId,
        created_at: datetime,
        updated_at: datetime,
    ):
        super().__init__(key, user_id, created_at)
        self._email = email
        self._password = password
        self._first_name = first_name
        self._last_name = last_name
        self._is_active = is_active
        self._role_id = role_id
        self._updated_at = updated_at

    @classmethod
    def create(
        cls,
        email: Email,
        password: Password,
        first_name: str,
        last_name: str,
        role_id: RoleId,
    ) -> Result["User", ValidationError]:
        """
        Create a new active user.

        Args:
            email: Validated email
            password: Already hashed password
            first_name: First name
            last_name: Last name
            role_id: The user's single role

        Returns:
            Ok(User) or Err(ValidationError) for invalid names
        """
        first_name_result = validate_name("firstName", "First name", first_name)
        if first_name_result.is_err():
            return first_name_result

        last_name_result = validate_name("lastName", "Last name", last_name)
        if last_name_result.is_err():
            return last_name_result

        now = utc_now()
        return Ok(cls(
            _CONSTRUCTION_KEY,
            UserId.create(),
            email,
            password,
            first_name_result.value,
            last_name_result.value,
            True,
            role_id,
            now,
            now,
        ))

    @classmethod
    def reconstitute(
        cls,
        user_id: UserId,
        email: Email,
        password: Password,
        first_name: str,
        last_name: str,
        is_active: bool,
        role_id: RoleId,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        """Rebuild a stored user without validation."""
        return cls(
            _CONSTRUCTION_KEY,
            user_id,
            email,
            password,
            first_name,
            last_name,
            is_active,
            role_id,
            created_at,
            updated_at,
        )

    @property
    def email(self) -> Email:
        return self._email

    @property
    def password(self) -> Password:
        return self._password

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def full_name(self) -> str:
        return f"{self._first_name} {self._last_name}"

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def role_id(self) -> RoleId:
        return self._role_id

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def can_authenticate(self) -> bool:
        return self._is_active

    def change_email(self, email: Email) -> Result[None, ValidationError]:
        if email == self._email:
            return Err(ValidationError("email", "New email is the same as current email"))
        self._email = email
        self._touch()
        return Ok(None)

    def change_password(self, password: Password) -> Result[None, ValidationError]:
        if password == self._password:
            return Err(ValidationError("password", "New password is the same as current password"))
        self._password = password
        self._touch()
        return Ok(None)

    def change_role(self, role_id: RoleId) -> Result[None, ValidationError]:
        if role_id == self._role_id:
            return Err(ValidationError("roleId", "New role is the same as current role"))
        self._role_id = role_id
        self._touch()
        return Ok(None)

    def change_first_name(self, first_name: str) -> Result[None, ValidationError]:
        result = validate_name("firstName", "First name", first_name)
        if result.is_err():
            return result
        self._first_name = result.value
        self._touch()
        return Ok(None)

    def change_last_name(self, last_name: str) -> Result[None, ValidationError]:
        result = validate_name("lastName", "Last name", last_name)
        if result.is_err():
            return result
        self._last_name = result.value
        self._touch()
        return Ok(None)

    def activate(self) -> Result[None, ValidationError]:
        if self._is_active:
            return Err(ValidationError("isActive", "User is already active"))
        self._is_active = True
        self._touch()
        return Ok(None)

    def deactivate(self) -> Result[None, ValidationError]:
        if not self._is_active:
            return Err(ValidationError("isActive", "User is already inactive"))
        self._is_active = False
        self._touch()
        return Ok(None)

    def _touch(self) -> None:
        self._updated_at = utc_now()

    def __repr__(self) -> str:
        return f"User(id={self._id.value!r}, email={self._email.value!r}, is_active={self._is_active})"
