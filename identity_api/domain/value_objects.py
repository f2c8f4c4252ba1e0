"""
Value objects for identity data.

Every value object is immutable, compared by value and obtained through
its ``create``/``from_string`` factory, which returns a ``Result``.
"""

import re
import uuid
from dataclasses import dataclass
from typing import ClassVar, Optional

from identity_api.errors import ValidationError
from identity_api.result import Err, Ok, Result


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
SPECIAL_CHARACTER_PATTERN = re.compile(r"[!@#$%^&*(),.?\":{}|<>_\-+=\[\]\\/'`~]")


@dataclass(frozen=True)
class Email:
    """Normalized (trimmed, lowercased) email address."""

    value: str

    MAX_LENGTH: ClassVar[int] = 255
    MAX_LOCAL_PART_LENGTH: ClassVar[int] = 64
    MAX_DOMAIN_LENGTH: ClassVar[int] = 255

    @classmethod
    def create(cls, value: Optional[str]) -> Result["Email", ValidationError]:
        """
        Validate and normalize an email address.

        Args:
            value: Raw email input

        Returns:
            Ok(Email) or Err(ValidationError) tagged with ``email``
        """
        if not value or not value.strip():
            return Err(ValidationError("email", "Email cannot be empty"))

        normalized = value.strip().lower()

        if len(normalized) > cls.MAX_LENGTH:
            return Err(ValidationError("email", f"Email cannot exceed {cls.MAX_LENGTH} characters"))

        if not EMAIL_PATTERN.match(normalized):
            return Err(ValidationError("email", "Invalid email format"))

        local_part, domain = normalized.rsplit("@", 1)
        if len(local_part) > cls.MAX_LOCAL_PART_LENGTH:
            return Err(ValidationError(
                "email", f"Email local part cannot exceed {cls.MAX_LOCAL_PART_LENGTH} characters"
            ))
        if len(domain) > cls.MAX_DOMAIN_LENGTH:
            return Err(ValidationError(
                "email", f"Email domain cannot exceed {cls.MAX_DOMAIN_LENGTH} characters"
            ))

        return Ok(cls(normalized))

    @property
    def local_part(self) -> str:
        return self.value.rsplit("@", 1)[0]

    @property
    def domain(self) -> str:
        return self.value.rsplit("@", 1)[1]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, repr=False)
class Password:
    """
    Password value.

    Holds plaintext only between ``create`` and hashing. Entities always
    carry the hashed form obtained through ``from_string``.
    """

    value: str

    MIN_LENGTH: ClassVar[int] = 8
    # bcrypt ignores everything past 72 bytes
    MAX_LENGTH: ClassVar[int] = 72

    @classmethod
    def create(cls, plaintext: Optional[str]) -> Result["Password", ValidationError]:
        """
        Check a plaintext password against the password policy.

        Does not hash. Hashing belongs to the password hash service.

        Args:
            plaintext: Candidate password

        Returns:
            Ok(Password) or Err(ValidationError) tagged with ``password``
        """
        if not plaintext:
            return Err(ValidationError("password", "Password cannot be empty"))

        if len(plaintext) < cls.MIN_LENGTH:
            return Err(ValidationError(
                "password", f"Password must be at least {cls.MIN_LENGTH} characters long"
            ))

        if len(plaintext) > cls.MAX_LENGTH:
            return Err(ValidationError(
                "password", f"Password cannot exceed {cls.MAX_LENGTH} characters"
            ))

        if not re.search(r"[A-Z]", plaintext):
            return Err(ValidationError(
                "password", "Password must contain at least one uppercase letter"
            ))

        if not re.search(r"[a-z]", plaintext):
            return Err(ValidationError(
                "password", "Password must contain at least one lowercase letter"
            ))

        if not re.search(r"[0-9]", plaintext):
            return Err(ValidationError(
                "password", "Password must contain at least one number"
            ))

        if not SPECIAL_CHARACTER_PATTERN.search(plaintext):
            return Err(ValidationError(
                "password", "Password must contain at least one special character"
            ))

        return Ok(cls(plaintext))

    @classmethod
    def from_string(cls, hashed: str) -> "Password":
        """Wrap an already hashed password loaded from storage."""
        return cls(hashed)

    def __repr__(self) -> str:
        return "Password('***')"

    def __str__(self) -> str:
        return "***"


@dataclass(frozen=True)
class EntityId:
    """Base for random UUID v4 identifiers."""

    value: str

    field_name: ClassVar[str] = "id"
    label: ClassVar[str] = "Entity"

    @classmethod
    def create(cls):
        """Generate a new random identifier."""
        return cls(str(uuid.uuid4()))

    @classmethod
    def from_string(cls, value: Optional[str]):
        """
        Parse an identifier, accepting only the UUID v4 format.

        Args:
            value: Raw identifier

        Returns:
            Ok(identifier) or Err(ValidationError) tagged with the id field
        """
        if not value or not value.strip():
            return Err(ValidationError(cls.field_name, f"{cls.label} ID cannot be empty"))

        candidate = value.strip()
        if not UUID_V4_PATTERN.match(candidate):
            return Err(ValidationError(cls.field_name, f"Invalid {cls.label.lower()} ID format"))

        return Ok(cls(candidate.lower()))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UserId(EntityId):
    field_name: ClassVar[str] = "userId"
    label: ClassVar[str] = "User"


@dataclass(frozen=True)
class RoleId(EntityId):
    field_name: ClassVar[str] = "roleId"
    label: ClassVar[str] = "Role"


@dataclass(frozen=True)
class PermissionId(EntityId):
    field_name: ClassVar[str] = "permissionId"
    label: ClassVar[str] = "Permission"
