"""
Entity to response-schema mappers.

These are the only path from domain entities to transport payloads.
"""

from typing import Iterable, List

from identity_api.domain.entities import Permission, Role, User
from identity_api.schemas.permissions import PermissionResponse
from identity_api.schemas.roles import RoleResponse
from identity_api.schemas.users import UserResponse


class UserMapper:
    """Maps users to their public view. The password hash is never copied."""

    @staticmethod
    def to_dto(user: User) -> UserResponse:
        return UserResponse(
            id=user.id.value,
            email=user.email.value,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            is_active=user.is_active,
            role_id=user.role_id.value,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @classmethod
    def to_dto_list(cls, users: Iterable[User]) -> List[UserResponse]:
        return [cls.to_dto(user) for user in users]


class RoleMapper:
    """Maps roles to their public view."""

    @staticmethod
    def to_dto(role: Role) -> RoleResponse:
        return RoleResponse(
            id=role.id.value,
            name=role.name,
            description=role.description,
            is_system=role.is_system,
            permission_ids=[permission_id.value for permission_id in role.permission_ids],
            created_at=role.created_at,
            updated_at=role.updated_at,
        )

    @classmethod
    def to_dto_list(cls, roles: Iterable[Role]) -> List[RoleResponse]:
        return [cls.to_dto(role) for role in roles]


class PermissionMapper:
    """Maps permissions to their public view."""

    @staticmethod
    def to_dto(permission: Permission) -> PermissionResponse:
        # Permissions only track creation time
        return PermissionResponse(
            id=permission.id.value,
            resource=permission.resource,
            action=permission.action,
            description=permission.description,
            created_at=permission.created_at,
            updated_at=permission.created_at,
        )

    @classmethod
    def to_dto_list(cls, permissions: Iterable[Permission]) -> List[PermissionResponse]:
        return [cls.to_dto(permission) for permission in permissions]
