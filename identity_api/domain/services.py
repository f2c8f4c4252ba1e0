"""
Authorization domain service.

Answers "may user X perform action A on resource R" by resolving the
user's role and its permissions through the repository ports.
"""

import logging
from typing import List, Optional

from identity_api.domain.entities import Permission, Role, User
from identity_api.domain.entities.role import normalize_role_name
from identity_api.domain.repositories import PermissionRepository, RoleRepository, UserRepository
from identity_api.domain.value_objects import UserId
from identity_api.errors import IdentityError, NotFoundError
from identity_api.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Resolves effective permissions through User -> Role -> Permission."""

    def __init__(
        self,
        user_repository: UserRepository,
        role_repository: RoleRepository,
        permission_repository: PermissionRepository,
    ):
        self.user_repository = user_repository
        self.role_repository = role_repository
        self.permission_repository = permission_repository

    async def _load_user(self, user_id: UserId) -> Result[User, IdentityError]:
        result = await self.user_repository.find_by_id(user_id)
        if result.is_err():
            return result
        if result.value is None:
            return Err(NotFoundError("User", user_id.value))
        return Ok(result.value)

    async def _load_role(self, user: User) -> Result[Optional[Role], IdentityError]:
        return await self.role_repository.find_by_id(user.role_id)

    async def _load_permissions(self, role: Role) -> Result[List[Permission], IdentityError]:
        permission_ids = role.permission_ids
        if not permission_ids:
            return Ok([])
        # Ids pointing at deleted permissions are simply not returned
        return await self.permission_repository.find_by_ids(permission_ids)

    async def user_has_permission(
        self,
        user_id: UserId,
        resource: str,
        action: str,
    ) -> Result[bool, IdentityError]:
        """
        Evaluate a single permission check.

        Args:
            user_id: User to check
            resource: Requested resource
            action: Requested action

        Returns:
            Ok(True/False). Err(NotFoundError) if the user or their role is
            missing. Repository errors are passed through.
        """
        user_result = await self._load_user(user_id)
        if user_result.is_err():
            return user_result
        user = user_result.value

        if not user.can_authenticate():
            logger.info(
                f"Permission denied for inactive user {user_id.value}",
                extra={
                    "event_type": "authorization_inactive_user",
                    "user_id": user_id.value,
                    "resource": resource,
                    "action": action,
                }
            )
            return Ok(False)

        role_result = await self._load_role(user)
        if role_result.is_err():
            return role_result
        role = role_result.value
        if role is None:
            return Err(NotFoundError("Role", user.role_id.value))

        permissions_result = await self._load_permissions(role)
        if permissions_result.is_err():
            return permissions_result

        allowed = any(permission.grants(resource, action) for permission in permissions_result.value)

        logger.debug(
            f"Permission check {resource}:{action} for user {user_id.value}: {allowed}",
            extra={
                "event_type": "authorization_check",
                "user_id": user_id.value,
                "role": role.name,
                "resource": resource,
                "action": action,
                "allowed": allowed,
            }
        )
        return Ok(allowed)

    async def user_has_role(self, user_id: UserId, role_name: str) -> Result[bool, IdentityError]:
        """
        Check the user's role by name, case-insensitively.

        Returns:
            Ok(False) when the user is inactive or the role is missing.
            Err(NotFoundError) when the user does not exist.
        """
        user_result = await self._load_user(user_id)
        if user_result.is_err():
            return user_result
        user = user_result.value

        if not user.can_authenticate():
            return Ok(False)

        role_result = await self._load_role(user)
        if role_result.is_err():
            return role_result
        role = role_result.value
        if role is None:
            return Ok(False)

        return Ok(role.name == normalize_role_name(role_name))

    async def get_user_permissions(self, user_id: UserId) -> Result[List[Permission], IdentityError]:
        """
        List the user's effective permissions.

        Returns:
            Ok([]) for inactive users or a missing role.
            Err(NotFoundError) when the user does not exist.
        """
        user_result = await self._load_user(user_id)
        if user_result.is_err():
            return user_result
        user = user_result.value

        if not user.can_authenticate():
            return Ok([])

        role_result = await self._load_role(user)
        if role_result.is_err():
            return role_result
        if role_result.value is None:
            return Ok([])

        return await self._load_permissions(role_result.value)
