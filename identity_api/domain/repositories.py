"""
Repository ports for the identity aggregates.

Storage-agnostic async interfaces. Every method returns a ``Result`` and
never raises across this boundary: storage failures come back as
``Err(DatabaseError)`` and late uniqueness violations as
``Err(ConflictError)``.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from identity_api.domain.entities import Permission, Role, User
from identity_api.domain.value_objects import Email, PermissionId, RoleId, UserId
from identity_api.errors import IdentityError
from identity_api.result import Result


class UserRepository(ABC):
    """Persistence port for users."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Result[Optional[User], IdentityError]:
        """Return the user or ``None`` when absent."""

    @abstractmethod
    async def find_by_email(self, email: Email) -> Result[Optional[User], IdentityError]:
        """Return the user owning ``email`` or ``None``."""

    @abstractmethod
    async def find_all(self, limit: int, offset: int) -> Result[List[User], IdentityError]:
        """Return one page of users."""

    @abstractmethod
    async def exists_by_email(self, email: Email) -> Result[bool, IdentityError]:
        pass

    @abstractmethod
    async def exists_by_id(self, user_id: UserId) -> Result[bool, IdentityError]:
        pass

    @abstractmethod
    async def save(self, user: User) -> Result[User, IdentityError]:
        """Insert a new user."""

    @abstractmethod
    async def update(self, user: User) -> Result[User, IdentityError]:
        """Persist changes to an existing user."""

    @abstractmethod
    async def delete(self, user_id: UserId) -> Result[bool, IdentityError]:
        """
        Delete a user.

        Returns:
            Ok(True) if a user existed, Ok(False) otherwise. Soft or hard
            deletion is up to the adapter.
        """

    @abstractmethod
    async def count(self) -> Result[int, IdentityError]:
        pass


class RoleRepository(ABC):
    """Persistence port for roles."""

    @abstractmethod
    async def find_by_id(self, role_id: RoleId) -> Result[Optional[Role], IdentityError]:
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> Result[Optional[Role], IdentityError]:
        """Look a role up by its (uppercase) name."""

    @abstractmethod
    async def find_by_ids(self, role_ids: List[RoleId]) -> Result[List[Role], IdentityError]:
        """Return the roles that exist among ``role_ids``. Unknown ids are omitted."""

    @abstractmethod
    async def find_all(self, limit: int, offset: int) -> Result[List[Role], IdentityError]:
        pass

    @abstractmethod
    async def exists_by_name(self, name: str) -> Result[bool, IdentityError]:
        pass

    @abstractmethod
    async def exists_by_id(self, role_id: RoleId) -> Result[bool, IdentityError]:
        pass

    @abstractmethod
    async def save(self, role: Role) -> Result[Role, IdentityError]:
        pass

    @abstractmethod
    async def update(self, role: Role) -> Result[Role, IdentityError]:
        pass

    @abstractmethod
    async def delete(self, role_id: RoleId) -> Result[bool, IdentityError]:
        pass

    @abstractmethod
    async def count(self) -> Result[int, IdentityError]:
        pass


class PermissionRepository(ABC):
    """Persistence port for permissions."""

    @abstractmethod
    async def find_by_id(self, permission_id: PermissionId) -> Result[Optional[Permission], IdentityError]:
        pass

    @abstractmethod
    async def find_by_code(self, resource: str, action: str) -> Result[Optional[Permission], IdentityError]:
        """Look a permission up by its ``resource:action`` pair."""

    @abstractmethod
    async def find_by_ids(
        self, permission_ids: List[PermissionId]
    ) -> Result[List[Permission], IdentityError]:
        """Return the permissions that exist among ``permission_ids``. Unknown ids are omitted."""

    @abstractmethod
    async def find_all(self, limit: int, offset: int) -> Result[List[Permission], IdentityError]:
        pass

    @abstractmethod
    async def exists_by_code(self, resource: str, action: str) -> Result[bool, IdentityError]:
        pass

    @abstractmethod
    async def exists_by_id(self, permission_id: PermissionId) -> Result[bool, IdentityError]:
        pass

    @abstractmethod
    async def save(self, permission: Permission) -> Result[Permission, IdentityError]:
        pass

    @abstractmethod
    async def update(self, permission: Permission) -> Result[Permission, IdentityError]:
        pass

    @abstractmethod
    async def delete(self, permission_id: PermissionId) -> Result[bool, IdentityError]:
        pass

    @abstractmethod
    async def count(self) -> Result[int, IdentityError]:
        pass
