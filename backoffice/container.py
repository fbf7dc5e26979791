"""
Name: Dependency Injection Container

Responsibilities:
  - Wire repositories, identity adapters and use cases
  - Pick the storage backend (memory | postgres) from settings
  - Provide factory functions used with FastAPI Depends()

Collaborators:
  - infrastructure.repositories: in-memory and PostgreSQL adapters
  - identity/auth_users.py: Argon2PasswordHasher, JwtTokenIssuer
  - application.use_cases

Constraints:
  - Manual DI (no library like dependency-injector)
  - Singletons via functools.lru_cache
  - APP_ENV=test always uses in-memory storage

Notes:
  - This is the composition root; use cases only see ports
  - Tests override factories through app.dependency_overrides
"""

from functools import lru_cache

from .application.dev_seed_admin import ensure_dev_admin, seed_permission_catalogue
from .application.use_cases import (
    AuthenticateUserUseCase,
    CreateRoleUseCase,
    CreateUserUseCase,
    GetAssignmentUseCase,
    GetRoleUseCase,
    ListActiveInstitutionsUseCase,
    ListAssignmentsUseCase,
    ListPermissionsUseCase,
    ListRolesSummaryUseCase,
    ListRolesUseCase,
    UpdateRoleStatusUseCase,
    UpdateUserStatusUseCase,
)
from .config import get_settings
from .domain.repositories import (
    AssignmentRepository,
    InstitutionRepository,
    PermissionRepository,
    RoleRepository,
    UserRepository,
)
from .domain.services import PasswordHasher, TokenIssuer
from .identity.auth_users import Argon2PasswordHasher, JwtTokenIssuer
from .infrastructure.repositories import (
    InMemoryAssignmentRepository,
    InMemoryInstitutionRepository,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
    InMemoryUserRepository,
    PostgresAssignmentRepository,
    PostgresInstitutionRepository,
    PostgresPermissionRepository,
    PostgresRoleRepository,
    PostgresUserRepository,
)


def use_postgres() -> bool:
    settings = get_settings()
    if settings.app_env.strip().lower() in {"test", "testing"}:
        return False
    return settings.storage_backend == "postgres"


# =========================================================
# Repositories (singletons)
# =========================================================
@lru_cache
def get_role_repository() -> RoleRepository:
    if use_postgres():
        return PostgresRoleRepository()
    return InMemoryRoleRepository()


@lru_cache
def get_permission_repository() -> PermissionRepository:
    if use_postgres():
        return PostgresPermissionRepository()
    repository = InMemoryPermissionRepository()
    seed_permission_catalogue(repository)
    return repository


@lru_cache
def get_user_repository() -> UserRepository:
    if use_postgres():
        return PostgresUserRepository()
    return InMemoryUserRepository()


@lru_cache
def get_assignment_repository() -> AssignmentRepository:
    if use_postgres():
        return PostgresAssignmentRepository()
    return InMemoryAssignmentRepository()


@lru_cache
def get_institution_repository() -> InstitutionRepository:
    if use_postgres():
        return PostgresInstitutionRepository()
    return InMemoryInstitutionRepository()


# =========================================================
# Identity adapters (singletons)
# =========================================================
@lru_cache
def get_password_hasher() -> PasswordHasher:
    return Argon2PasswordHasher()


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return JwtTokenIssuer()


def sync_permission_catalogue() -> None:
    """R: Insert missing catalogue rows into PostgreSQL (ids shared with memory)."""
    if use_postgres():
        seed_permission_catalogue(get_permission_repository())


def seed_local_data() -> None:
    """R: Seed the in-memory backend when DEV_SEED_ADMIN is enabled."""
    if use_postgres():
        return
    ensure_dev_admin(
        get_settings(),
        institutions=get_institution_repository(),
        permissions=get_permission_repository(),
        roles=get_role_repository(),
        users=get_user_repository(),
        password_hasher=get_password_hasher(),
    )


# =========================================================
# Use cases (new instance per request)
# =========================================================
def get_create_role_use_case() -> CreateRoleUseCase:
    return CreateRoleUseCase(
        role_repository=get_role_repository(),
        permission_repository=get_permission_repository(),
    )


def get_list_roles_use_case() -> ListRolesUseCase:
    return ListRolesUseCase(repository=get_role_repository())


def get_list_roles_summary_use_case() -> ListRolesSummaryUseCase:
    return ListRolesSummaryUseCase(repository=get_role_repository())


def get_get_role_use_case() -> GetRoleUseCase:
    return GetRoleUseCase(repository=get_role_repository())


def get_update_role_status_use_case() -> UpdateRoleStatusUseCase:
    return UpdateRoleStatusUseCase(repository=get_role_repository())


def get_list_permissions_use_case() -> ListPermissionsUseCase:
    return ListPermissionsUseCase(repository=get_permission_repository())


def get_list_assignments_use_case() -> ListAssignmentsUseCase:
    return ListAssignmentsUseCase(repository=get_assignment_repository())


def get_get_assignment_use_case() -> GetAssignmentUseCase:
    return GetAssignmentUseCase(repository=get_assignment_repository())


def get_list_active_institutions_use_case() -> ListActiveInstitutionsUseCase:
    return ListActiveInstitutionsUseCase(repository=get_institution_repository())


def get_create_user_use_case() -> CreateUserUseCase:
    return CreateUserUseCase(
        user_repository=get_user_repository(),
        role_repository=get_role_repository(),
        institution_repository=get_institution_repository(),
    )


def get_update_user_status_use_case() -> UpdateUserStatusUseCase:
    return UpdateUserStatusUseCase(repository=get_user_repository())


def get_authenticate_user_use_case() -> AuthenticateUserUseCase:
    return AuthenticateUserUseCase(
        repository=get_user_repository(),
        password_hasher=get_password_hasher(),
        token_issuer=get_token_issuer(),
    )
