"""PostgreSQL repository implementations (psycopg 3, raw parameterized SQL)."""

from .assignment import PostgresAssignmentRepository
from .institution import PostgresInstitutionRepository
from .permission import PostgresPermissionRepository
from .role import PostgresRoleRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresAssignmentRepository",
    "PostgresInstitutionRepository",
    "PostgresPermissionRepository",
    "PostgresRoleRepository",
    "PostgresUserRepository",
]
