"""Domain layer exports"""

from .claims import CLAIMS_VERSION, TokenClaim, build_claims
from .entities import (
    Assignment,
    AssignmentStatus,
    Institution,
    InstitutionStatus,
    LoginAttempt,
    Password,
    Permission,
    PhoneNumber,
    Point,
    Role,
    RoleStatus,
    User,
    UserStatus,
)
from .filters import AssignmentFilter, Criterion, Operator, RoleFilter
from .repositories import (
    AssignmentRepository,
    InstitutionRepository,
    ListPort,
    PermissionRepository,
    RoleRepository,
    UserRepository,
)
from .services import AccessToken, PasswordHasher, TokenIssuer

__all__ = [
    "CLAIMS_VERSION",
    "TokenClaim",
    "build_claims",
    "Assignment",
    "AssignmentStatus",
    "Institution",
    "InstitutionStatus",
    "LoginAttempt",
    "Password",
    "Permission",
    "PhoneNumber",
    "Point",
    "Role",
    "RoleStatus",
    "User",
    "UserStatus",
    "AssignmentFilter",
    "Criterion",
    "Operator",
    "RoleFilter",
    "AssignmentRepository",
    "InstitutionRepository",
    "ListPort",
    "PermissionRepository",
    "RoleRepository",
    "UserRepository",
    "AccessToken",
    "PasswordHasher",
    "TokenIssuer",
]
