"""
Name: Back-office Endpoint Tests

Responsibilities:
  - Permission guards (401 without token, 403 without permission)
  - Role, permission, assignment, institution and user endpoints
  - User creation with email uniqueness
  - Error kinds mapped to RFC 7807 responses
  - Token issuance through the real Argon2 + JWT adapters

Notes:
  - Use case factories are overridden with in-memory repositories
"""

from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backoffice.api import routes
from backoffice.application.dev_seed_admin import permission_id, seed_permission_catalogue
from backoffice.application.use_cases import (
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
from backoffice.domain.claims import build_claims
from backoffice.domain.entities import AssignmentStatus, PhoneNumber, RoleStatus, UserStatus
from backoffice.exception_handlers import register_exception_handlers
from backoffice.identity.auth_users import (
    Argon2PasswordHasher,
    JwtTokenIssuer,
    Permissions,
    decode_access_token,
)
from backoffice.infrastructure.repositories import (
    InMemoryAssignmentRepository,
    InMemoryInstitutionRepository,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
    InMemoryUserRepository,
)
from tests.factories import make_assignment, make_permission, make_role, make_user

pytestmark = pytest.mark.unit

ALL_PERMISSIONS = tuple(p.value for p in Permissions)


@pytest.fixture
def stores(institution):
    permissions = InMemoryPermissionRepository()
    seed_permission_catalogue(permissions)
    return SimpleNamespace(
        roles=InMemoryRoleRepository(),
        permissions=permissions,
        users=InMemoryUserRepository(),
        assignments=InMemoryAssignmentRepository(),
        institutions=InMemoryInstitutionRepository([institution]),
        hasher=Argon2PasswordHasher(),
    )


def _build_app(stores) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(routes.router, prefix="/api/v1")
    app.dependency_overrides.update(
        {
            routes.get_create_role_use_case: lambda: CreateRoleUseCase(
                stores.roles, stores.permissions
            ),
            routes.get_list_roles_use_case: lambda: ListRolesUseCase(stores.roles),
            routes.get_list_roles_summary_use_case: lambda: ListRolesSummaryUseCase(
                stores.roles
            ),
            routes.get_get_role_use_case: lambda: GetRoleUseCase(stores.roles),
            routes.get_update_role_status_use_case: lambda: UpdateRoleStatusUseCase(
                stores.roles
            ),
            routes.get_list_permissions_use_case: lambda: ListPermissionsUseCase(
                stores.permissions
            ),
            routes.get_list_assignments_use_case: lambda: ListAssignmentsUseCase(
                stores.assignments
            ),
            routes.get_get_assignment_use_case: lambda: GetAssignmentUseCase(
                stores.assignments
            ),
            routes.get_list_active_institutions_use_case: lambda: (
                ListActiveInstitutionsUseCase(stores.institutions)
            ),
            routes.get_create_user_use_case: lambda: CreateUserUseCase(
                stores.users, stores.roles, stores.institutions
            ),
            routes.get_update_user_status_use_case: lambda: UpdateUserStatusUseCase(
                stores.users
            ),
            routes.get_authenticate_user_use_case: lambda: AuthenticateUserUseCase(
                repository=stores.users,
                password_hasher=stores.hasher,
                token_issuer=JwtTokenIssuer(),
            ),
        }
    )
    return app


@pytest.fixture
def client(stores) -> TestClient:
    return TestClient(_build_app(stores))


def _auth(institution, *permission_names) -> dict[str, str]:
    role = make_role(
        institution_id=institution.id,
        permissions=tuple(make_permission(name) for name in permission_names),
    )
    claims = build_claims(make_user(institution=institution, roles=(role,)))
    token = JwtTokenIssuer().issue(claims)
    return {"Authorization": f"Bearer {token.access_token}"}


# =========================================================
# Guards and error shape
# =========================================================
class TestGuards:
    def test_missing_token_is_401(self, client):
        response = client.post("/api/v1/roles", json={})

        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_missing_permission_is_403(self, client, institution):
        response = client.post(
            "/api/v1/role",
            json={"name": "Admin", "permission_ids": [str(uuid4())]},
            headers=_auth(institution, "role:list"),
        )

        body = response.json()
        assert response.status_code == 403
        assert body["detail"] == "Missing permission: role:create"
        assert body["status"] == 403

    def test_invalid_token_is_401(self, client):
        response = client.get(
            "/api/v1/permissions", headers={"Authorization": "Bearer not.a.jwt"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"


# =========================================================
# Roles
# =========================================================
class TestRoleEndpoints:
    def test_create_then_list(self, client, institution):
        headers = _auth(institution, "role:create", "role:list")

        created = client.post(
            "/api/v1/role",
            json={
                "name": "Coordinator",
                "permission_ids": [str(permission_id("assignment:list"))],
            },
            headers=headers,
        )
        listed = client.post("/api/v1/roles", json={}, headers=headers)

        assert created.status_code == 200
        assert created.json()["is_success"] is True
        assert created.json()["http_status"] == "OK"
        page = listed.json()["response"]
        assert [r["name"] for r in page["content"]] == ["Coordinator"]
        assert page["content"][0]["status"] == "ACTIVE"
        assert page["total_element_count"] == 1
        assert page["total_page_count"] == 1

    def test_unfiltered_list_echoes_no_filter(self, client, stores, institution):
        stores.roles.save(make_role(institution_id=institution.id))

        response = client.post(
            "/api/v1/roles", json={}, headers=_auth(institution, "role:list")
        )

        page = response.json()["response"]
        assert page["filtered_by"] is None
        assert str(institution.id) not in response.text

    def test_duplicate_name_is_409(self, client, stores, institution):
        stores.roles.save(make_role(institution_id=institution.id, name="Admin"))

        response = client.post(
            "/api/v1/role",
            json={"name": "Admin", "permission_ids": [str(permission_id("role:list"))]},
            headers=_auth(institution, "role:create"),
        )

        body = response.json()
        assert response.status_code == 409
        assert body["code"] == "CONFLICT"
        assert body["type"].endswith("/errors/conflict")
        assert body["errors"][0]["error_id"]

    def test_unknown_permission_is_404(self, client, stores, institution):
        response = client.post(
            "/api/v1/role",
            json={"name": "Admin", "permission_ids": [str(uuid4())]},
            headers=_auth(institution, "role:create"),
        )

        assert response.status_code == 404
        assert stores.roles.find_all_by_institution_id(institution.id) == []

    def test_blank_name_is_422(self, client, institution):
        response = client.post(
            "/api/v1/role",
            json={"name": "   ", "permission_ids": [str(uuid4())]},
            headers=_auth(institution, "role:create"),
        )
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_list_with_filter_sort_and_paging(self, client, stores, institution, other_institution):
        for name, status in [
            ("Admin", RoleStatus.ACTIVE),
            ("Auditor", RoleStatus.PASSIVE),
            ("Operator", RoleStatus.ACTIVE),
        ]:
            stores.roles.save(make_role(institution_id=institution.id, name=name, status=status))
        stores.roles.save(make_role(institution_id=other_institution.id, name="Foreign"))

        response = client.post(
            "/api/v1/roles",
            json={
                "pageable": {
                    "page": 1,
                    "page_size": 1,
                    "orders": [{"property": "name", "direction": "DESC"}],
                },
                "filter": {"statuses": ["ACTIVE"]},
            },
            headers=_auth(institution, "role:list"),
        )

        page = response.json()["response"]
        assert response.status_code == 200
        assert [r["name"] for r in page["content"]] == ["Operator"]
        assert page["total_element_count"] == 2
        assert page["total_page_count"] == 2
        assert page["sorted_by"] == [{"property": "name", "direction": "DESC"}]
        assert page["filtered_by"] == {"name": None, "statuses": ["ACTIVE"]}

    def test_unsupported_sort_property_is_422(self, client, institution):
        response = client.post(
            "/api/v1/roles",
            json={"pageable": {"orders": [{"property": "institution_id"}]}},
            headers=_auth(institution, "role:list"),
        )
        assert response.status_code == 422

    def test_summary_lists_active_roles(self, client, stores, institution):
        stores.roles.save(make_role(institution_id=institution.id, name="B"))
        stores.roles.save(
            make_role(institution_id=institution.id, name="A", status=RoleStatus.PASSIVE)
        )

        response = client.get("/api/v1/roles/summary", headers=_auth(institution, "role:list"))

        assert [r["name"] for r in response.json()["response"]] == ["B"]

    def test_detail_of_other_institution_is_404(self, client, stores, institution, other_institution):
        foreign = make_role(institution_id=other_institution.id)
        stores.roles.save(foreign)

        response = client.get(
            f"/api/v1/role/{foreign.id}", headers=_auth(institution, "role:detail")
        )

        assert response.status_code == 404

    def test_detail_lists_permissions(self, client, stores, institution):
        role = make_role(
            institution_id=institution.id,
            permissions=(make_permission("role:list"), make_permission("assignment:list")),
        )
        stores.roles.save(role)

        response = client.get(
            f"/api/v1/role/{role.id}", headers=_auth(institution, "role:detail")
        )

        detail = response.json()["response"]
        assert detail["id"] == str(role.id)
        assert [p["name"] for p in detail["permissions"]] == ["assignment:list", "role:list"]

    def test_status_lifecycle(self, client, stores, institution):
        role = make_role(institution_id=institution.id)
        stores.roles.save(role)
        headers = _auth(institution, "role:update", "role:delete")

        passivated = client.patch(f"/api/v1/role/{role.id}/passivate", headers=headers)
        again = client.patch(f"/api/v1/role/{role.id}/passivate", headers=headers)
        deleted = client.delete(f"/api/v1/role/{role.id}", headers=headers)
        revived = client.patch(f"/api/v1/role/{role.id}/activate", headers=headers)

        assert passivated.status_code == 200
        assert again.status_code == 409
        assert deleted.status_code == 200
        assert revived.status_code == 409
        stored = stores.roles.find_by_id_and_institution_id(role.id, institution.id)
        assert stored.status == RoleStatus.DELETED


# =========================================================
# Permissions, assignments, institutions
# =========================================================
def test_permissions_need_only_authentication(client, institution):
    response = client.get("/api/v1/permissions", headers=_auth(institution, "role:list"))

    names = [p["name"] for p in response.json()["response"]]
    assert response.status_code == 200
    assert names == sorted(ALL_PERMISSIONS)


def test_assignments_filtered_by_phone(client, stores, institution, other_institution):
    phone = PhoneNumber(country_code="90", line_number="5551112233")
    wanted = make_assignment(institution_id=institution.id, phone_number=phone)
    stores.assignments.add(wanted)
    stores.assignments.add(make_assignment(institution_id=institution.id))
    stores.assignments.add(
        make_assignment(institution_id=other_institution.id, phone_number=phone)
    )

    response = client.post(
        "/api/v1/assignments",
        json={"filter": {"phone_number": {"country_code": "90", "line_number": "5551112233"}}},
        headers=_auth(institution, "assignment:list"),
    )

    page = response.json()["response"]
    assert [a["id"] for a in page["content"]] == [str(wanted.id)]
    assert page["filtered_by"]["phone_number"] == {
        "country_code": "90",
        "line_number": "5551112233",
    }


def test_assignment_detail(client, stores, institution):
    assignment = make_assignment(institution_id=institution.id, status=AssignmentStatus.DONE)
    stores.assignments.add(assignment)

    response = client.get(
        f"/api/v1/assignment/{assignment.id}",
        headers=_auth(institution, "assignment:detail"),
    )

    body = response.json()["response"]
    assert body["status"] == "DONE"
    assert body["phone_number"] == {"country_code": "90", "line_number": "5550000000"}


def test_institutions_summary_is_public(client, institution):
    response = client.get("/api/v1/institutions/summary")

    assert response.status_code == 200
    assert response.json()["response"] == [
        {"id": str(institution.id), "name": institution.name}
    ]


# =========================================================
# Users and authentication
# =========================================================
class TestUserEndpoints:
    def _create_body(self, *role_ids, email="grace@example.org") -> dict:
        return {
            "email_address": email,
            "first_name": "Grace",
            "last_name": "Hopper",
            "phone_number": {"country_code": "90", "line_number": "5551112233"},
            "role_ids": [str(role_id) for role_id in role_ids],
        }

    def test_create_user(self, client, stores, institution):
        role = make_role(institution_id=institution.id)
        stores.roles.save(role)

        response = client.post(
            "/api/v1/user",
            json=self._create_body(role.id, email="Grace@Example.org"),
            headers=_auth(institution, "user:create"),
        )

        body = response.json()["response"]
        assert response.status_code == 200
        assert body["email_address"] == "grace@example.org"
        assert body["status"] == "NOT_VERIFIED"
        assert body["role_ids"] == [str(role.id)]
        assert "password" not in response.text
        stored = stores.users.find_by_email_address("grace@example.org")
        assert stored.institution_id == institution.id
        assert stored.status == UserStatus.NOT_VERIFIED

    def test_duplicate_email_is_409(self, client, stores, institution, other_institution):
        stores.users.save(
            make_user(institution=other_institution, email_address="grace@example.org")
        )
        role = make_role(institution_id=institution.id)
        stores.roles.save(role)

        response = client.post(
            "/api/v1/user",
            json=self._create_body(role.id, email="GRACE@example.org"),
            headers=_auth(institution, "user:create"),
        )

        body = response.json()
        assert response.status_code == 409
        assert body["code"] == "CONFLICT"
        assert body["type"].endswith("/errors/conflict")

    def test_role_of_other_institution_is_404(
        self, client, stores, institution, other_institution
    ):
        foreign = make_role(institution_id=other_institution.id)
        stores.roles.save(foreign)

        response = client.post(
            "/api/v1/user",
            json=self._create_body(foreign.id),
            headers=_auth(institution, "user:create"),
        )

        assert response.status_code == 404
        assert not stores.users.exists_by_email_address("grace@example.org")

    def test_create_needs_user_create_permission(self, client, institution):
        response = client.post(
            "/api/v1/user",
            json=self._create_body(uuid4()),
            headers=_auth(institution, "user:update"),
        )
        assert response.status_code == 403

    def test_passivate_then_delete(self, client, stores, institution):
        user = make_user(institution=institution)
        stores.users.save(user)
        headers = _auth(institution, "user:update")

        assert client.patch(f"/api/v1/user/{user.id}/passivate", headers=headers).status_code == 200
        assert client.delete(f"/api/v1/user/{user.id}", headers=headers).status_code == 200
        response = client.patch(f"/api/v1/user/{user.id}/activate", headers=headers)

        assert response.status_code == 409

    def test_user_of_other_institution_is_404(self, client, stores, institution, other_institution):
        foreign = make_user(institution=other_institution)
        stores.users.save(foreign)

        response = client.patch(
            f"/api/v1/user/{foreign.id}/activate", headers=_auth(institution, "user:update")
        )

        assert response.status_code == 404


class TestTokenEndpoint:
    @pytest.fixture
    def admin(self, stores, institution):
        role = make_role(
            institution_id=institution.id,
            permissions=tuple(make_permission(name) for name in ALL_PERMISSIONS),
        )
        user = make_user(
            institution=institution,
            roles=(role,),
            hashed_password=stores.hasher.hash("s3cret-pass"),
        )
        stores.users.save(user)
        return user

    def test_issues_usable_token(self, client, stores, admin):
        response = client.post(
            "/api/v1/authentication/token",
            json={"email_address": "ADA@example.org", "password": "s3cret-pass"},
        )

        body = response.json()["response"]
        assert response.status_code == 200
        assert body["token_type"] == "Bearer"
        identity = decode_access_token(body["access_token"])
        assert identity.user_id == admin.id
        assert identity.permissions == frozenset(ALL_PERMISSIONS)

        saved = stores.users.find_by_email_address("ada@example.org")
        assert saved.login_attempt.last_login_at is not None

    @pytest.mark.parametrize(
        "email, password",
        [("ada@example.org", "wrong"), ("nobody@example.org", "s3cret-pass")],
    )
    def test_bad_credentials_share_one_message(self, client, admin, email, password):
        response = client.post(
            "/api/v1/authentication/token",
            json={"email_address": email, "password": password},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_inactive_user_is_401(self, client, stores, admin):
        stores.users.save(admin.passivate())

        response = client.post(
            "/api/v1/authentication/token",
            json={"email_address": "ada@example.org", "password": "s3cret-pass"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_user_without_institution_is_generic_500(self, client, stores):
        user = make_user(
            institution=None,
            email_address="orphan@example.org",
            hashed_password=stores.hasher.hash("pw"),
        )
        stores.users.save(user)

        response = client.post(
            "/api/v1/authentication/token",
            json={"email_address": "orphan@example.org", "password": "pw"},
        )

        body = response.json()
        assert response.status_code == 500
        assert body["detail"] == "An unexpected error occurred"
        assert str(user.id) not in response.text
