"""
Name: Dev Seed Admin

Responsibilities:
  - Own the permission catalogue (names and stable ids) for every backend
  - Seed a local admin on startup (in-memory backend)

Constraints:
  - Permission ids derive from names only, so memory and PostgreSQL agree
"""

from uuid import NAMESPACE_URL, uuid4, uuid5

from ..config import Settings
from ..domain.entities import (
    Institution,
    InstitutionStatus,
    LoginAttempt,
    Password,
    Permission,
    Role,
    User,
    UserStatus,
)
from ..domain.repositories import PermissionRepository
from ..domain.services import PasswordHasher
from ..identity.auth_users import Permissions
from ..infrastructure.repositories.in_memory import (
    InMemoryInstitutionRepository,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
    InMemoryUserRepository,
)
from ..logger import logger

_LOCAL_ENVS = {"local", "development", "test"}


def permission_id(name: str):
    """R: Stable id per permission name, so restarts keep ids."""
    return uuid5(NAMESPACE_URL, f"backoffice:permission:{name}")


def permission_catalogue() -> list[Permission]:
    return [Permission(id=permission_id(p.value), name=p.value) for p in Permissions]


def seed_permission_catalogue(repository: PermissionRepository) -> list[Permission]:
    """R: Insert catalogue entries the repository does not hold yet."""
    permissions = permission_catalogue()
    repository.save_all(permissions)
    logger.info("Permission catalogue synced", extra={"count": len(permissions)})
    return permissions


def ensure_dev_admin(
    settings: Settings,
    *,
    institutions: InMemoryInstitutionRepository,
    permissions: InMemoryPermissionRepository,
    roles: InMemoryRoleRepository,
    users: InMemoryUserRepository,
    password_hasher: PasswordHasher,
) -> User | None:
    """
    R: Create an institution, an admin role holding every permission and an
    ACTIVE admin user. FAIL-FAST when enabled outside a local environment.
    """
    if not settings.dev_seed_admin:
        return None

    current_env = settings.app_env.strip().lower()
    if current_env not in _LOCAL_ENVS:
        raise RuntimeError(
            f"FATAL: DEV_SEED_ADMIN is enabled but APP_ENV is '{current_env}'."
        )

    existing = users.find_by_email_address(settings.dev_seed_admin_email)
    if existing is not None:
        logger.info("Dev seed admin: user already exists (skipping)")
        return existing

    institution = Institution(
        id=uuid4(),
        name=settings.dev_seed_institution_name,
        status=InstitutionStatus.ACTIVE,
    )
    institutions.add(institution)

    admin_role = Role.create(
        name="Admin",
        institution_id=institution.id,
        permissions=permissions.find_all(),
    )
    roles.save(admin_role)

    admin = User(
        id=uuid4(),
        email_address=settings.dev_seed_admin_email.strip().lower(),
        first_name="Local",
        last_name="Admin",
        status=UserStatus.ACTIVE,
        password=Password(
            id=uuid4(),
            hashed_value=password_hasher.hash(settings.dev_seed_admin_password),
        ),
        login_attempt=LoginAttempt.new(),
        roles=frozenset({admin_role}),
        institution=institution,
    )
    users.save(admin)
    logger.info(
        "Dev seed admin: created admin user",
        extra={"user_id": str(admin.id), "institution_id": str(institution.id)},
    )
    return admin
