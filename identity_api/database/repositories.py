"""
SQLAlchemy implementations of the identity repository ports.

Repositories never raise: storage failures come back as
``Err(DatabaseError)`` and unique constraint violations discovered at
write time come back as ``Err(ConflictError)``, the same shape the use
cases produce for their own existence checks.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from identity_api.domain.entities import Permission, Role, User
from identity_api.domain.entities.role import normalize_role_name
from identity_api.domain.repositories import PermissionRepository, RoleRepository, UserRepository
from identity_api.domain.value_objects import Email, Password, PermissionId, RoleId, UserId
from identity_api.errors import ConflictError, DatabaseError, IdentityError, NotFoundError
from identity_api.result import Err, Ok, Result

from .models import PermissionModel, RoleModel, UserModel, role_permissions

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_foreign_key_violation(error: IntegrityError) -> bool:
    return "foreign key" in str(error.orig).lower()


class SQLAlchemyRepository:
    """Shared session handling and error translation."""

    model_name = "Record"

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _database_error(self, operation: str, error: SQLAlchemyError) -> Err[DatabaseError]:
        logger.error(
            f"Failed to {operation}: {error}",
            extra={
                "event_type": "repository_error",
                "model": self.model_name,
                "operation": operation,
            }
        )
        return Err(DatabaseError(f"Failed to {operation}", cause=error))

    async def _integrity_error(self, error: IntegrityError, conflict: IdentityError) -> Err[IdentityError]:
        await self.session.rollback()
        logger.warning(
            f"Constraint violation on {self.model_name}: {error.orig}",
            extra={
                "event_type": "record_constraint_violation",
                "model": self.model_name,
                "error_code": conflict.error_code,
            }
        )
        return Err(conflict)

    async def _count(self, model) -> Result[int, IdentityError]:
        try:
            total = await self.session.scalar(select(func.count()).select_from(model))
        except SQLAlchemyError as e:
            return self._database_error(f"count {self.model_name.lower()}s", e)
        return Ok(int(total or 0))


class SQLAlchemyUserRepository(SQLAlchemyRepository, UserRepository):
    """User persistence backed by the ``users`` table."""

    model_name = "User"

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User.reconstitute(
            user_id=UserId(model.id),
            email=Email(model.email),
            password=Password.from_string(model.password_hash),
            first_name=model.first_name,
            last_name=model.last_name,
            is_active=model.is_active,
            role_id=RoleId(model.role_id),
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    @staticmethod
    def _apply(model: UserModel, user: User) -> None:
        model.email = user.email.value
        model.password_hash = user.password.value
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.is_active = user.is_active
        model.role_id = user.role_id.value
        model.updated_at = user.updated_at

    def _write_conflict(self, error: IntegrityError, user: User) -> IdentityError:
        if _is_foreign_key_violation(error):
            return NotFoundError("Role", user.role_id.value)
        return ConflictError("User", "email", user.email.value, "Email already registered")

    async def find_by_id(self, user_id: UserId) -> Result[Optional[User], IdentityError]:
        try:
            model = await self.session.get(UserModel, user_id.value)
        except SQLAlchemyError as e:
            return self._database_error("find user by id", e)
        return Ok(self._to_entity(model) if model else None)

    async def find_by_email(self, email: Email) -> Result[Optional[User], IdentityError]:
        try:
            model = await self.session.scalar(select(UserModel).where(UserModel.email == email.value))
        except SQLAlchemyError as e:
            return self._database_error("find user by email", e)
        return Ok(self._to_entity(model) if model else None)

    async def find_all(self, limit: int, offset: int) -> Result[List[User], IdentityError]:
        try:
            models = await self.session.scalars(
                select(UserModel).order_by(UserModel.created_at, UserModel.id).limit(limit).offset(offset)
            )
        except SQLAlchemyError as e:
            return self._database_error("list users", e)
        return Ok([self._to_entity(model) for model in models])

    async def exists_by_email(self, email: Email) -> Result[bool, IdentityError]:
        try:
            found = await self.session.scalar(select(UserModel.id).where(UserModel.email == email.value))
        except SQLAlchemyError as e:
            return self._database_error("check user email", e)
        return Ok(found is not None)

    async def exists_by_id(self, user_id: UserId) -> Result[bool, IdentityError]:
        try:
            found = await self.session.scalar(select(UserModel.id).where(UserModel.id == user_id.value))
        except SQLAlchemyError as e:
            return self._database_error("check user id", e)
        return Ok(found is not None)

    async def save(self, user: User) -> Result[User, IdentityError]:
        model = UserModel(id=user.id.value, created_at=user.created_at)
        self._apply(model, user)
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            return await self._integrity_error(e, self._write_conflict(e, user))
        except SQLAlchemyError as e:
            return self._database_error("save user", e)

        logger.info(
            f"Created User with ID: {user.id.value}",
            extra={"event_type": "record_created", "model": "User", "record_id": user.id.value}
        )
        return Ok(user)

    async def update(self, user: User) -> Result[User, IdentityError]:
        try:
            model = await self.session.get(UserModel, user.id.value)
            if model is None:
                return Err(NotFoundError("User", user.id.value))
            self._apply(model, user)
            await self.session.flush()
        except IntegrityError as e:
            return await self._integrity_error(e, self._write_conflict(e, user))
        except SQLAlchemyError as e:
            return self._database_error("update user", e)
        return Ok(user)

    async def delete(self, user_id: UserId) -> Result[bool, IdentityError]:
        try:
            result = await self.session.execute(delete(UserModel).where(UserModel.id == user_id.value))
        except SQLAlchemyError as e:
            return self._database_error("delete user", e)

        deleted = result.rowcount > 0
        if deleted:
            logger.info(
                f"Deleted User with ID: {user_id.value}",
                extra={"event_type": "record_deleted", "model": "User", "record_id": user_id.value}
            )
        return Ok(deleted)

    async def count(self) -> Result[int, IdentityError]:
        return await self._count(UserModel)


class SQLAlchemyRoleRepository(SQLAlchemyRepository, RoleRepository):
    """Role persistence backed by ``roles`` and ``role_permissions``."""

    model_name = "Role"

    async def _permission_ids_by_role(self, role_ids: List[str]) -> Dict[str, List[PermissionId]]:
        if not role_ids:
            return {}
        rows = await self.session.execute(
            select(role_permissions.c.role_id, role_permissions.c.permission_id)
            .where(role_permissions.c.role_id.in_(role_ids))
        )
        mapping: Dict[str, List[PermissionId]] = defaultdict(list)
        for role_id, permission_id in rows:
            mapping[role_id].append(PermissionId(permission_id))
        return mapping

    async def _to_entities(self, models: List[RoleModel]) -> List[Role]:
        permission_ids = await self._permission_ids_by_role([model.id for model in models])
        return [
            Role.reconstitute(
                role_id=RoleId(model.id),
                name=model.name,
                description=model.description,
                is_system=model.is_system,
                permission_ids=permission_ids.get(model.id, []),
                created_at=_as_utc(model.created_at),
                updated_at=_as_utc(model.updated_at),
            )
            for model in models
        ]

    async def _find_one(self, statement, operation: str) -> Result[Optional[Role], IdentityError]:
        try:
            model = await self.session.scalar(statement)
            if model is None:
                return Ok(None)
            roles = await self._to_entities([model])
        except SQLAlchemyError as e:
            return self._database_error(operation, e)
        return Ok(roles[0])

    async def _write_permissions(self, role: Role) -> None:
        await self.session.execute(delete(role_permissions).where(role_permissions.c.role_id == role.id.value))
        rows = [
            {"role_id": role.id.value, "permission_id": permission_id.value}
            for permission_id in role.permission_ids
        ]
        if rows:
            await self.session.execute(insert(role_permissions), rows)

    def _write_conflict(self, error: IntegrityError, role: Role) -> IdentityError:
        if _is_foreign_key_violation(error):
            missing = [permission_id.value for permission_id in role.permission_ids]
            return NotFoundError("Permission", ",".join(missing), missing_ids=missing)
        return ConflictError("Role", "name", role.name)

    async def find_by_id(self, role_id: RoleId) -> Result[Optional[Role], IdentityError]:
        return await self._find_one(select(RoleModel).where(RoleModel.id == role_id.value), "find role by id")

    async def find_by_name(self, name: str) -> Result[Optional[Role], IdentityError]:
        return await self._find_one(
            select(RoleModel).where(RoleModel.name == normalize_role_name(name)),
            "find role by name",
        )

    async def find_by_ids(self, role_ids: List[RoleId]) -> Result[List[Role], IdentityError]:
        if not role_ids:
            return Ok([])
        try:
            models = list(await self.session.scalars(
                select(RoleModel).where(RoleModel.id.in_([role_id.value for role_id in role_ids]))
            ))
            roles = await self._to_entities(models)
        except SQLAlchemyError as e:
            return self._database_error("find roles by ids", e)
        return Ok(roles)

    async def find_all(self, limit: int, offset: int) -> Result[List[Role], IdentityError]:
        try:
            models = list(await self.session.scalars(
                select(RoleModel).order_by(RoleModel.created_at, RoleModel.id).limit(limit).offset(offset)
            ))
            roles = await self._to_entities(models)
        except SQLAlchemyError as e:
            return self._database_error("list roles", e)
        return Ok(roles)

    async def exists_by_name(self, name: str) -> Result[bool, IdentityError]:
        try:
            found = await self.session.scalar(
                select(RoleModel.id).where(RoleModel.name == normalize_role_name(name))
            )
        except SQLAlchemyError as e:
            return self._database_error("check role name", e)
        return Ok(found is not None)

    async def exists_by_id(self, role_id: RoleId) -> Result[bool, IdentityError]:
        try:
            found = await self.session.scalar(select(RoleModel.id).where(RoleModel.id == role_id.value))
        except SQLAlchemyError as e:
            return self._database_error("check role id", e)
        return Ok(found is not None)

    async def save(self, role: Role) -> Result[Role, IdentityError]:
        self.session.add(RoleModel(
            id=role.id.value,
            name=role.name,
            description=role.description,
            is_system=role.is_system,
            created_at=role.created_at,
            updated_at=role.updated_at,
        ))
        try:
            await self.session.flush()
            await self._write_permissions(role)
        except IntegrityError as e:
            return await self._integrity_error(e, self._write_conflict(e, role))
        except SQLAlchemyError as e:
            return self._database_error("save role", e)

        logger.info(
            f"Created Role with ID: {role.id.value}",
            extra={"event_type": "record_created", "model": "Role", "record_id": role.id.value}
        )
        return Ok(role)

    async def update(self, role: Role) -> Result[Role, IdentityError]:
        try:
            model = await self.session.get(RoleModel, role.id.value)
            if model is None:
                return Err(NotFoundError("Role", role.id.value))
            model.name = role.name
            model.description = role.description
            model.is_system = role.is_system
            model.updated_at = role.updated_at
            await self.session.flush()
            await self._write_permissions(role)
        except IntegrityError as e:
            return await self._integrity_error(e, self._write_conflict(e, role))
        except SQLAlchemyError as e:
            return self._database_error("update role", e)
        return Ok(role)

    async def delete(self, role_id: RoleId) -> Result[bool, IdentityError]:
        try:
            await self.session.execute(
                delete(role_permissions).where(role_permissions.c.role_id == role_id.value)
            )
            result = await self.session.execute(delete(RoleModel).where(RoleModel.id == role_id.value))
        except IntegrityError as e:
            return await self._integrity_error(
                e, ConflictError("Role", "id", role_id.value, "Role is still assigned to users")
            )
        except SQLAlchemyError as e:
            return self._database_error("delete role", e)
        return Ok(result.rowcount > 0)

    async def count(self) -> Result[int, IdentityError]:
        return await self._count(RoleModel)


class SQLAlchemyPermissionRepository(SQLAlchemyRepository, PermissionRepository):
    """Permission persistence backed by the ``permissions`` table."""

    model_name = "Permission"

    @staticmethod
    def _to_entity(model: PermissionModel) -> Permission:
        return Permission.reconstitute(
            permission_id=PermissionId(model.id),
            resource=model.resource,
            action=model.action,
            description=model.description,
            created_at=_as_utc(model.created_at),
        )

    @staticmethod
    def _code_filter(resource: str, action: str):
        return (
            PermissionModel.resource == resource.strip().lower(),
            PermissionModel.action == action.strip().lower(),
        )

    async def find_by_id(self, permission_id: PermissionId) -> Result[Optional[Permission], IdentityError]:
        try:
            model = await self.session.get(PermissionModel, permission_id.value)
        except SQLAlchemyError as e:
            return self._database_error("find permission by id", e)
        return Ok(self._to_entity(model) if model else None)

    async def find_by_code(self, resource: str, action: str) -> Result[Optional[Permission], IdentityError]:
        try:
            model = await self.session.scalar(select(PermissionModel).where(*self._code_filter(resource, action)))
        except SQLAlchemyError as e:
            return self._database_error("find permission by code", e)
        return Ok(self._to_entity(model) if model else None)

    async def find_by_ids(self, permission_ids: List[PermissionId]) -> Result[List[Permission], IdentityError]:
        if not permission_ids:
            return Ok([])
        try:
            models = await self.session.scalars(
                select(PermissionModel).where(
                    PermissionModel.id.in_([permission_id.value for permission_id in permission_ids])
                )
            )
        except SQLAlchemyError as e:
            return self._database_error("find permissions by ids", e)
        return Ok([self._to_entity(model) for model in models])

    async def find_all(self, limit: int, offset: int) -> Result[List[Permission], IdentityError]:
        try:
            models = await self.session.scalars(
                select(PermissionModel)
                .order_by(PermissionModel.resource, PermissionModel.action)
                .limit(limit)
                .offset(offset)
            )
        except SQLAlchemyError as e:
            return self._database_error("list permissions", e)
        return Ok([self._to_entity(model) for model in models])

    async def exists_by_code(self, resource: str, action: str) -> Result[bool, IdentityError]:
        try:
            found = await self.session.scalar(select(PermissionModel.id).where(*self._code_filter(resource, action)))
        except SQLAlchemyError as e:
            return self._database_error("check permission code", e)
        return Ok(found is not None)

    async def exists_by_id(self, permission_id: PermissionId) -> Result[bool, IdentityError]:
        try:
            found = await self.session.scalar(
                select(PermissionModel.id).where(PermissionModel.id == permission_id.value)
            )
        except SQLAlchemyError as e:
            return self._database_error("check permission id", e)
        return Ok(found is not None)

    async def save(self, permission: Permission) -> Result[Permission, IdentityError]:
        self.session.add(PermissionModel(
            id=permission.id.value,
            resource=permission.resource,
            action=permission.action,
            description=permission.description,
            created_at=permission.created_at,
        ))
        try:
            await self.session.flush()
        except IntegrityError as e:
            return await self._integrity_error(e, ConflictError("Permission", "code", permission.code))
        except SQLAlchemyError as e:
            return self._database_error("save permission", e)

        logger.info(
            f"Created Permission {permission.code} with ID: {permission.id.value}",
            extra={"event_type": "record_created", "model": "Permission", "record_id": permission.id.value}
        )
        return Ok(permission)

    async def update(self, permission: Permission) -> Result[Permission, IdentityError]:
        try:
            model = await self.session.get(PermissionModel, permission.id.value)
            if model is None:
                return Err(NotFoundError("Permission", permission.id.value))
            model.description = permission.description
            await self.session.flush()
        except SQLAlchemyError as e:
            return self._database_error("update permission", e)
        return Ok(permission)

    async def delete(self, permission_id: PermissionId) -> Result[bool, IdentityError]:
        try:
            await self.session.execute(
                delete(role_permissions).where(role_permissions.c.permission_id == permission_id.value)
            )
            result = await self.session.execute(
                delete(PermissionModel).where(PermissionModel.id == permission_id.value)
            )
        except SQLAlchemyError as e:
            return self._database_error("delete permission", e)
        return Ok(result.rowcount > 0)

    async def count(self) -> Result[int, IdentityError]:
        return await self._count(PermissionModel)
