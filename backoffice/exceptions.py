"""
Name: Custom Exceptions and Error Handling

Responsibilities:
  - Define the domain error taxonomy (AlreadyExists, NotExist,
    AuthorizationDenied, PreconditionViolation) plus infrastructure errors
  - Generate unique error IDs for tracking

Collaborators:
  - api/exception_handlers.py: maps each kind to an RFC 7807 response
  - application.use_cases: raise the resource-specific subclasses

Constraints:
  - Every error carries error_code, message and error_id
  - Messages of domain errors are user-safe; PreconditionViolation and
    DatabaseError messages are internal and never sent to clients

Notes:
  - error_id is UUID for log correlation
"""
from uuid import UUID, uuid4


class BackofficeError(Exception):
    """Base exception for the back-office core."""

    error_code: str = "BACKOFFICE_ERROR"

    def __init__(self, message: str, error_id: str | None = None):
        self.message = message
        self.error_id = error_id or str(uuid4())
        super().__init__(message)


# ---------------------------------------------------------------------------
# Error kinds
# ---------------------------------------------------------------------------


class AlreadyExistsError(BackofficeError):
    """Uniqueness or state conflict; surfaced as 409, never retried."""

    error_code: str = "ALREADY_EXISTS"


class NotExistError(BackofficeError):
    """Lookup-by-id miss; surfaced as 404."""

    error_code: str = "NOT_EXIST"


class AuthorizationDeniedError(BackofficeError):
    """Request outside the caller's permissions or institution scope."""

    error_code: str = "AUTHORIZATION_DENIED"


class AuthenticationError(BackofficeError):
    """Credentials could not be verified."""

    error_code: str = "AUTHENTICATION_FAILED"


class PreconditionViolationError(BackofficeError):
    """Internal contract breach. A programming error, never recovered."""

    error_code: str = "PRECONDITION_VIOLATION"


class DatabaseError(BackofficeError):
    """Database connection or query error."""

    error_code: str = "DATABASE_ERROR"


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


class RoleAlreadyExistsByNameError(AlreadyExistsError):
    def __init__(self, name: str):
        super().__init__(f"role already exists! name:{name}")


class RoleAlreadyActiveError(AlreadyExistsError):
    def __init__(self, role_id: UUID):
        super().__init__(f"role is already active! roleId:{role_id}")


class RoleAlreadyPassiveError(AlreadyExistsError):
    def __init__(self, role_id: UUID):
        super().__init__(f"role is already passive! roleId:{role_id}")


class RoleAlreadyDeletedError(AlreadyExistsError):
    def __init__(self, role_id: UUID):
        super().__init__(f"role is already deleted! roleId:{role_id}")


class RoleNotExistError(NotExistError):
    def __init__(self, role_id: UUID):
        super().__init__(f"role not exist! roleId:{role_id}")


class PermissionNotExistError(NotExistError):
    def __init__(self, permission_ids: list[UUID]):
        joined = ", ".join(str(pid) for pid in permission_ids)
        super().__init__(f"permission not exist! permissionIds:{joined}")


# ---------------------------------------------------------------------------
# Users, assignments, institutions
# ---------------------------------------------------------------------------


class UserNotExistError(NotExistError):
    def __init__(self, user_id: UUID):
        super().__init__(f"user not exist! userId:{user_id}")


class UserAlreadyExistsByEmailError(AlreadyExistsError):
    def __init__(self, email_address: str):
        super().__init__(f"user already exists! emailAddress:{email_address}")


class UserAlreadyActiveError(AlreadyExistsError):
    def __init__(self, user_id: UUID):
        super().__init__(f"user is already active! userId:{user_id}")


class UserAlreadyPassiveError(AlreadyExistsError):
    def __init__(self, user_id: UUID):
        super().__init__(f"user is already passive! userId:{user_id}")


class UserAlreadyDeletedError(AlreadyExistsError):
    def __init__(self, user_id: UUID):
        super().__init__(f"user is already deleted! userId:{user_id}")


class UserNotActiveError(AuthenticationError):
    def __init__(self, user_id: UUID):
        super().__init__(f"user is not active! userId:{user_id}")


class InstitutionNotExistError(NotExistError):
    def __init__(self, institution_id: UUID):
        super().__init__(f"institution not exist! institutionId:{institution_id}")


class AssignmentNotExistError(NotExistError):
    def __init__(self, assignment_id: UUID):
        super().__init__(f"assignment not exist! assignmentId:{assignment_id}")
