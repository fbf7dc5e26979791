"""
Name: Back-office API Controllers

Responsibilities:
  - Expose role, permission, assignment, institution, user and
    authentication endpoints under /api/v1
  - Check caller permissions and pass the caller institution to use cases
  - Wrap results in the response envelope

Collaborators:
  - application.use_cases
  - container: use case factories
  - identity/auth_users.py: require_permission
  - api/schemas.py

Notes:
  - Controllers stay thin; domain errors propagate to exception_handlers
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from ..application.use_cases import (
    AuthenticateUserInput,
    AuthenticateUserUseCase,
    CreateRoleInput,
    CreateRoleUseCase,
    CreateUserInput,
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
from ..container import (
    get_authenticate_user_use_case,
    get_create_role_use_case,
    get_create_user_use_case,
    get_get_assignment_use_case,
    get_get_role_use_case,
    get_list_active_institutions_use_case,
    get_list_assignments_use_case,
    get_list_permissions_use_case,
    get_list_roles_summary_use_case,
    get_list_roles_use_case,
    get_update_role_status_use_case,
    get_update_user_status_use_case,
)
from ..domain.entities import RoleStatus, UserStatus
from ..identity.auth_users import Identity, Permissions, require_identity, require_permission
from .error_responses import OPENAPI_ERROR_RESPONSES
from .schemas import (
    AssignmentListReq,
    AssignmentRes,
    CreateRoleReq,
    CreateUserReq,
    Envelope,
    InstitutionSummaryRes,
    PageRes,
    PermissionRes,
    RoleDetailRes,
    RoleListReq,
    RoleRes,
    RoleSummaryRes,
    TokenReq,
    TokenRes,
    UserRes,
    assignment_filter_echo,
    role_filter_echo,
)

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)


# =========================================================
# Roles
# =========================================================
@router.post("/role", response_model=Envelope[None], tags=["roles"])
def create_role(
    req: CreateRoleReq,
    identity: Identity = Depends(require_permission(Permissions.ROLE_CREATE)),
    use_case: CreateRoleUseCase = Depends(get_create_role_use_case),
):
    use_case.execute(
        CreateRoleInput(
            name=req.name,
            institution_id=identity.institution_id,
            permission_ids=req.permission_ids,
        )
    )
    return Envelope.ok()


@router.post("/roles", response_model=Envelope[PageRes[RoleRes]], tags=["roles"])
def list_roles(
    req: RoleListReq,
    identity: Identity = Depends(require_permission(Permissions.ROLE_LIST)),
    use_case: ListRolesUseCase = Depends(get_list_roles_use_case),
):
    query_filter = req.filter.to_domain() if req.filter else None
    page = use_case.execute(
        pageable=req.pageable.to_pageable(),
        query_filter=query_filter,
        institution_id=identity.institution_id,
    )
    return Envelope.ok(
        PageRes.build(page.map(RoleRes.from_domain), role_filter_echo(page.filter))
    )


@router.get(
    "/roles/summary", response_model=Envelope[list[RoleSummaryRes]], tags=["roles"]
)
def list_roles_summary(
    identity: Identity = Depends(require_permission(Permissions.ROLE_LIST)),
    use_case: ListRolesSummaryUseCase = Depends(get_list_roles_summary_use_case),
):
    roles = use_case.execute(identity.institution_id)
    return Envelope.ok([RoleSummaryRes.from_domain(role) for role in roles])


@router.get("/role/{role_id}", response_model=Envelope[RoleDetailRes], tags=["roles"])
def get_role(
    role_id: UUID,
    identity: Identity = Depends(require_permission(Permissions.ROLE_DETAIL)),
    use_case: GetRoleUseCase = Depends(get_get_role_use_case),
):
    role = use_case.execute(role_id, identity.institution_id)
    return Envelope.ok(RoleDetailRes.from_domain(role))


@router.patch("/role/{role_id}/activate", response_model=Envelope[None], tags=["roles"])
def activate_role(
    role_id: UUID,
    identity: Identity = Depends(require_permission(Permissions.ROLE_UPDATE)),
    use_case: UpdateRoleStatusUseCase = Depends(get_update_role_status_use_case),
):
    use_case.execute(role_id, identity.institution_id, RoleStatus.ACTIVE)
    return Envelope.ok()


@router.patch("/role/{role_id}/passivate", response_model=Envelope[None], tags=["roles"])
def passivate_role(
    role_id: UUID,
    identity: Identity = Depends(require_permission(Permissions.ROLE_UPDATE)),
    use_case: UpdateRoleStatusUseCase = Depends(get_update_role_status_use_case),
):
    use_case.execute(role_id, identity.institution_id, RoleStatus.PASSIVE)
    return Envelope.ok()


@router.delete("/role/{role_id}", response_model=Envelope[None], tags=["roles"])
def delete_role(
    role_id: UUID,
    identity: Identity = Depends(require_permission(Permissions.ROLE_DELETE)),
    use_case: UpdateRoleStatusUseCase = Depends(get_update_role_status_use_case),
):
    use_case.execute(role_id, identity.institution_id, RoleStatus.DELETED)
    return Envelope.ok()


# =========================================================
# Permissions
# =========================================================
@router.get(
    "/permissions", response_model=Envelope[list[PermissionRes]], tags=["permissions"]
)
def list_permissions(
    _identity: Identity = Depends(require_identity()),
    use_case: ListPermissionsUseCase = Depends(get_list_permissions_use_case),
):
    permissions = use_case.execute()
    return Envelope.ok([PermissionRes.from_domain(p) for p in permissions])


# =========================================================
# Assignments
# =========================================================
@router.post(
    "/assignments",
    response_model=Envelope[PageRes[AssignmentRes]],
    tags=["assignments"],
)
def list_assignments(
    req: AssignmentListReq,
    identity: Identity = Depends(require_permission(Permissions.ASSIGNMENT_LIST)),
    use_case: ListAssignmentsUseCase = Depends(get_list_assignments_use_case),
):
    query_filter = req.filter.to_domain() if req.filter else None
    page = use_case.execute(
        pageable=req.pageable.to_pageable(),
        query_filter=query_filter,
        institution_id=identity.institution_id,
    )
    return Envelope.ok(
        PageRes.build(
            page.map(AssignmentRes.from_domain), assignment_filter_echo(page.filter)
        )
    )


@router.get(
    "/assignment/{assignment_id}",
    response_model=Envelope[AssignmentRes],
    tags=["assignments"],
)
def get_assignment(
    assignment_id: UUID,
    identity: Identity = Depends(require_permission(Permissions.ASSIGNMENT_DETAIL)),
    use_case: GetAssignmentUseCase = Depends(get_get_assignment_use_case),
):
    assignment = use_case.execute(assignment_id, identity.institution_id)
    return Envelope.ok(AssignmentRes.from_domain(assignment))


# =========================================================
# Institutions
# =========================================================
@router.get(
    "/institutions/summary",
    response_model=Envelope[list[InstitutionSummaryRes]],
    tags=["institutions"],
)
def list_active_institutions(
    use_case: ListActiveInstitutionsUseCase = Depends(
        get_list_active_institutions_use_case
    ),
):
    institutions = use_case.execute()
    return Envelope.ok([InstitutionSummaryRes.from_domain(i) for i in institutions])


# =========================================================
# Users
# =========================================================
@router.post("/user", response_model=Envelope[UserRes], tags=["users"])
def create_user(
    req: CreateUserReq,
    identity: Identity = Depends(require_permission(Permissions.USER_CREATE)),
    use_case: CreateUserUseCase = Depends(get_create_user_use_case),
):
    user = use_case.execute(
        CreateUserInput(
            email_address=req.email_address,
            first_name=req.first_name,
            last_name=req.last_name,
            institution_id=identity.institution_id,
            role_ids=req.role_ids,
            phone_number=req.phone_number.to_domain() if req.phone_number else None,
            city=req.city,
        )
    )
    return Envelope.ok(UserRes.from_domain(user))


def _update_user_status(
    user_id: UUID,
    identity: Identity,
    use_case: UpdateUserStatusUseCase,
    target: UserStatus,
) -> Envelope:
    use_case.execute(user_id, identity.institution_id, target)
    return Envelope.ok()


@router.patch("/user/{user_id}/activate", response_model=Envelope[None], tags=["users"])
def activate_user(
    user_id: UUID,
    identity: Identity = Depends(require_permission(Permissions.USER_UPDATE)),
    use_case: UpdateUserStatusUseCase = Depends(get_update_user_status_use_case),
):
    return _update_user_status(user_id, identity, use_case, UserStatus.ACTIVE)


@router.patch("/user/{user_id}/passivate", response_model=Envelope[None], tags=["users"])
def passivate_user(
    user_id: UUID,
    identity: Identity = Depends(require_permission(Permissions.USER_UPDATE)),
    use_case: UpdateUserStatusUseCase = Depends(get_update_user_status_use_case),
):
    return _update_user_status(user_id, identity, use_case, UserStatus.PASSIVE)


@router.delete("/user/{user_id}", response_model=Envelope[None], tags=["users"])
def delete_user(
    user_id: UUID,
    identity: Identity = Depends(require_permission(Permissions.USER_UPDATE)),
    use_case: UpdateUserStatusUseCase = Depends(get_update_user_status_use_case),
):
    return _update_user_status(user_id, identity, use_case, UserStatus.DELETED)


# =========================================================
# Authentication
# =========================================================
@router.post(
    "/authentication/token", response_model=Envelope[TokenRes], tags=["authentication"]
)
def issue_token(
    req: TokenReq,
    use_case: AuthenticateUserUseCase = Depends(get_authenticate_user_use_case),
):
    token = use_case.execute(
        AuthenticateUserInput(email_address=req.email_address, password=req.password)
    )
    return Envelope.ok(
        TokenRes(
            access_token=token.access_token,
            token_type=token.token_type,
            expires_at=token.expires_at,
        )
    )
