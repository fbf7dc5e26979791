"""Infrastructure repositories: PostgreSQL and in-memory adapters."""

from .in_memory import (
    InMemoryAssignmentRepository,
    InMemoryInstitutionRepository,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
    InMemoryUserRepository,
)
from .postgres import (
    PostgresAssignmentRepository,
    PostgresInstitutionRepository,
    PostgresPermissionRepository,
    PostgresRoleRepository,
    PostgresUserRepository,
)

__all__ = [
    "InMemoryAssignmentRepository",
    "InMemoryInstitutionRepository",
    "InMemoryPermissionRepository",
    "InMemoryRoleRepository",
    "InMemoryUserRepository",
    "PostgresAssignmentRepository",
    "PostgresInstitutionRepository",
    "PostgresPermissionRepository",
    "PostgresRoleRepository",
    "PostgresUserRepository",
]
