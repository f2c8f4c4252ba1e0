"""
Seed the permission catalogue, the system roles and an optional admin.

Running the seeder twice leaves the database unchanged. System roles are
brought back to their canonical permission set on every run.

Usage:
    python -m identity_api.database.seed
"""

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from identity_api.domain.entities import Permission, Role, User
from identity_api.domain.value_objects import Email, Password, PermissionId
from identity_api.errors import IdentityError
from identity_api.result import Result
from identity_api.services.ports import PasswordHashService

from .repositories import SQLAlchemyPermissionRepository, SQLAlchemyRoleRepository, SQLAlchemyUserRepository

logger = logging.getLogger(__name__)

ADMIN_PASSWORD_MIN_LENGTH = 12

PERMISSION_CATALOGUE: List[Tuple[str, str, str]] = [
    ("users", "create", "Create users"),
    ("users", "read", "Read users"),
    ("users", "update", "Update users"),
    ("users", "delete", "Delete users"),
    ("roles", "create", "Create roles"),
    ("roles", "read", "Read roles"),
    ("roles", "update", "Update roles"),
    ("roles", "delete", "Delete roles"),
    ("permissions", "read", "Read permissions"),
    ("*", "*", "Every action on every resource"),
]

SYSTEM_ROLES: Dict[str, Tuple[str, List[str]]] = {
    "ADMIN": ("Full access to every resource", ["*:*"]),
    "USER": ("Standard account", ["users:read", "roles:read", "permissions:read"]),
    "GUEST": ("Authenticated account without grants", []),
}


class SeedError(Exception):
    """Raised when seeding cannot complete."""


@dataclass
class SeedReport:
    """What a seeding run changed."""

    permissions_created: List[str] = field(default_factory=list)
    roles_created: List[str] = field(default_factory=list)
    roles_updated: List[str] = field(default_factory=list)
    admin_created: Optional[str] = None


def _require(result: Result, operation: str):
    if result.is_err():
        error: IdentityError = result.error
        raise SeedError(f"Could not {operation}: {error.message}")
    return result.value


def validate_admin_password(password: str) -> Password:
    """
    Apply the admin password rule: the normal policy plus a longer minimum.

    Raises:
        SeedError: If the password is too weak
    """
    if len(password or "") < ADMIN_PASSWORD_MIN_LENGTH:
        raise SeedError(f"Admin password must be at least {ADMIN_PASSWORD_MIN_LENGTH} characters long")
    return _require(Password.create(password), "validate admin password")


async def seed_permissions(
    repository: SQLAlchemyPermissionRepository,
    report: SeedReport,
) -> Dict[str, PermissionId]:
    """Insert missing catalogue permissions and return every code's id."""
    ids: Dict[str, PermissionId] = {}
    for resource, action, description in PERMISSION_CATALOGUE:
        existing = _require(await repository.find_by_code(resource, action), "look up permission")
        if existing is None:
            permission = _require(Permission.create(resource, action, description), "build permission")
            existing = _require(await repository.save(permission), "save permission")
            report.permissions_created.append(existing.code)
        ids[existing.code] = existing.id
    return ids


async def seed_roles(
    repository: SQLAlchemyRoleRepository,
    permission_ids: Dict[str, PermissionId],
    report: SeedReport,
) -> Dict[str, Role]:
    """Insert missing system roles and resync the permission sets of existing ones."""
    roles: Dict[str, Role] = {}
    for name, (description, codes) in SYSTEM_ROLES.items():
        wanted = [permission_ids[code] for code in codes]
        role = _require(await repository.find_by_name(name), "look up role")

        if role is None:
            role = _require(Role.create(name, description, wanted, is_system=True), "build role")
            role = _require(await repository.save(role), "save role")
            report.roles_created.append(name)
        elif set(role.permission_ids) != set(wanted):
            _require(role.replace_permissions(wanted), "assign role permissions")
            role = _require(await repository.update(role), "update role")
            report.roles_updated.append(name)

        roles[name] = role
    return roles


async def seed_admin(
    repository: SQLAlchemyUserRepository,
    password_hash_service: PasswordHashService,
    admin_role: Role,
    admin_email: str,
    admin_password: str,
    report: SeedReport,
) -> None:
    """Create the initial administrator unless the email is already taken."""
    email = _require(Email.create(admin_email), "validate admin email")
    if _require(await repository.exists_by_email(email), "look up admin"):
        logger.info(
            "Admin user already exists, skipping",
            extra={"event_type": "seed_admin_exists"}
        )
        return

    password = validate_admin_password(admin_password)
    hashed = await password_hash_service.hash(password.value)
    user = _require(User.create(
        email=email,
        password=Password.from_string(hashed),
        first_name="System",
        last_name="Administrator",
        role_id=admin_role.id,
    ), "build admin")
    _require(await repository.save(user), "save admin")
    report.admin_created = email.value


async def seed_database(
    session: AsyncSession,
    password_hash_service: PasswordHashService,
    admin_email: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> SeedReport:
    """
    Seed one database through an open session.

    The caller owns the transaction.

    Args:
        session: Session to write through
        password_hash_service: Hasher for the admin password
        admin_email: Initial admin email, skipped when empty
        admin_password: Initial admin password

    Returns:
        SeedReport describing the changes

    Raises:
        SeedError: On invalid admin credentials or a storage failure
    """
    report = SeedReport()

    permission_ids = await seed_permissions(SQLAlchemyPermissionRepository(session), report)
    roles = await seed_roles(SQLAlchemyRoleRepository(session), permission_ids, report)

    if admin_email:
        if not admin_password:
            raise SeedError("admin_password is required when admin_email is set")
        await seed_admin(
            SQLAlchemyUserRepository(session),
            password_hash_service,
            roles["ADMIN"],
            admin_email,
            admin_password,
            report,
        )

    logger.info(
        "Database seeded",
        extra={
            "event_type": "database_seeded",
            "permissions_created": len(report.permissions_created),
            "roles_created": report.roles_created,
            "roles_updated": report.roles_updated,
            "admin_created": report.admin_created is not None,
        }
    )
    return report


async def run_seed() -> SeedReport:
    """Seed the configured database."""
    from identity_api.auth.passwords import BcryptPasswordHashService
    from identity_api.config.settings import is_production, settings
    from .config import close_database, get_session, init_database

    if is_production() and not settings.get("allow_prod_seed", False):
        raise SeedError("Refusing to seed a production database without allow_prod_seed")

    await init_database()
    try:
        async with get_session() as session:
            return await seed_database(
                session,
                BcryptPasswordHashService(rounds=settings.bcrypt_rounds),
                admin_email=settings.get("admin_email"),
                admin_password=settings.get("admin_password"),
            )
    finally:
        await close_database()


def main() -> int:
    from identity_api.utils.logging import configure_structlog

    configure_structlog()
    try:
        asyncio.run(run_seed())
    except SeedError as e:
        logger.error(str(e), extra={"event_type": "seed_failed"})
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
