"""Application use cases"""

from .authenticate_user import AuthenticateUserInput, AuthenticateUserUseCase
from .create_role import CreateRoleInput, CreateRoleUseCase
from .create_user import CreateUserInput, CreateUserUseCase
from .get_assignment import GetAssignmentUseCase
from .get_role import GetRoleUseCase
from .list_active_institutions import ListActiveInstitutionsUseCase
from .list_assignments import ListAssignmentsUseCase
from .list_permissions import ListPermissionsUseCase
from .list_roles import ListRolesUseCase
from .list_roles_summary import ListRolesSummaryUseCase
from .update_role_status import UpdateRoleStatusUseCase
from .update_user_status import UpdateUserStatusUseCase

__all__ = [
    "AuthenticateUserInput",
    "AuthenticateUserUseCase",
    "CreateRoleInput",
    "CreateRoleUseCase",
    "CreateUserInput",
    "CreateUserUseCase",
    "GetAssignmentUseCase",
    "GetRoleUseCase",
    "ListActiveInstitutionsUseCase",
    "ListAssignmentsUseCase",
    "ListPermissionsUseCase",
    "ListRolesUseCase",
    "ListRolesSummaryUseCase",
    "UpdateRoleStatusUseCase",
    "UpdateUserStatusUseCase",
]
