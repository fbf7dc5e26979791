"""
Name: HTTP Request / Response Schemas

Responsibilities:
  - Validate list requests (pageable + per-resource filter)
  - Map domain entities and pages into response models
  - Wrap every success in the response envelope

Collaborators:
  - api/routes.py
  - pagination: Pageable, Order, Page
  - domain.filters: RoleFilter, AssignmentFilter

Constraints:
  - Sort properties are validated against per-resource allowlists
  - Password material never appears in any response model
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ..config import get_settings
from ..domain.entities import (
    Assignment,
    AssignmentStatus,
    Institution,
    Permission,
    PhoneNumber,
    Role,
    RoleStatus,
    User,
    UserStatus,
)
from ..domain.filters import AssignmentFilter, RoleFilter
from ..pagination import Direction, Order, Page, Pageable

T = TypeVar("T")

_settings = get_settings()


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class Envelope(BaseModel, Generic[T]):
    """R: Success wrapper shared by every endpoint."""

    time: datetime
    http_status: str = "OK"
    is_success: bool = True
    response: T | None = None

    @classmethod
    def ok(cls, response: Any = None) -> Envelope:
        return cls(time=datetime.now(timezone.utc), response=response)


# ---------------------------------------------------------------------------
# Paging
# ---------------------------------------------------------------------------


class OrderReq(BaseModel):
    property: str = Field(..., min_length=1, max_length=64)
    direction: Direction = Direction.ASC


class PageableReq(BaseModel):
    page: int = Field(1, ge=1, description="1-based page number")
    page_size: int = Field(
        _settings.default_page_size, ge=1, le=_settings.max_page_size
    )
    orders: list[OrderReq] = Field(default_factory=list, max_length=5)

    def to_pageable(self) -> Pageable:
        return Pageable(
            page_number=self.page,
            page_size=self.page_size,
            orders=tuple(Order(o.property, o.direction) for o in self.orders),
        )


class ListReq(BaseModel):
    """R: Base list request; subclasses declare the sortable properties."""

    SORTABLE: ClassVar[frozenset[str]] = frozenset()

    pageable: PageableReq = Field(default_factory=PageableReq)

    @field_validator("pageable")
    @classmethod
    def orders_must_be_sortable(cls, v: PageableReq) -> PageableReq:
        unknown = [o.property for o in v.orders if o.property not in cls.SORTABLE]
        if unknown:
            raise ValueError(f"unsupported sort properties: {', '.join(unknown)}")
        return v


class OrderRes(BaseModel):
    property: str
    direction: Direction


class PageRes(BaseModel, Generic[T]):
    content: list[T]
    page_number: int
    page_size: int
    total_page_count: int
    total_element_count: int
    sorted_by: list[OrderRes] | None = None
    filtered_by: dict[str, Any] | None = None

    @classmethod
    def build(cls, page: Page, filtered_by: dict | None) -> PageRes:
        """R: page must already hold response models (see Page.map)."""
        return cls(
            content=list(page.content),
            page_number=page.page_number,
            page_size=page.page_size,
            total_page_count=page.total_page_count,
            total_element_count=page.total_element_count,
            sorted_by=[OrderRes(property=o.property, direction=o.direction) for o in page.orders]
            or None,
            filtered_by=filtered_by,
        )


# ---------------------------------------------------------------------------
# Shared value models
# ---------------------------------------------------------------------------


class PhoneNumberModel(BaseModel):
    country_code: str = Field(..., pattern=r"^\d{1,3}$")
    line_number: str = Field(..., pattern=r"^\d{4,14}$")

    def to_domain(self) -> PhoneNumber:
        return PhoneNumber(country_code=self.country_code, line_number=self.line_number)

    @classmethod
    def from_domain(cls, phone: PhoneNumber) -> PhoneNumberModel:
        return cls(country_code=phone.country_code, line_number=phone.line_number)


# ---------------------------------------------------------------------------
# Roles and permissions
# ---------------------------------------------------------------------------


class CreateRoleReq(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    permission_ids: list[UUID] = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("name must have at least 2 non-blank characters")
        return v


class RoleFilterReq(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    statuses: list[RoleStatus] | None = Field(None, min_length=1)

    def to_domain(self) -> RoleFilter:
        return RoleFilter(
            name=self.name,
            statuses=frozenset(self.statuses) if self.statuses else None,
        )


class RoleListReq(ListReq):
    SORTABLE: ClassVar[frozenset[str]] = frozenset({"name", "status", "created_at"})

    filter: RoleFilterReq | None = None


class PermissionRes(BaseModel):
    id: UUID
    name: str

    @classmethod
    def from_domain(cls, permission: Permission) -> PermissionRes:
        return cls(id=permission.id, name=permission.name)


class RoleSummaryRes(BaseModel):
    id: UUID
    name: str

    @classmethod
    def from_domain(cls, role: Role) -> RoleSummaryRes:
        return cls(id=role.id, name=role.name)


class RoleRes(BaseModel):
    id: UUID
    name: str
    status: RoleStatus
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, role: Role) -> RoleRes:
        return cls(id=role.id, name=role.name, status=role.status, created_at=role.created_at)


class RoleDetailRes(RoleRes):
    permissions: list[PermissionRes]

    @classmethod
    def from_domain(cls, role: Role) -> RoleDetailRes:
        return cls(
            id=role.id,
            name=role.name,
            status=role.status,
            created_at=role.created_at,
            permissions=[
                PermissionRes.from_domain(p)
                for p in sorted(role.permissions, key=lambda p: p.name)
            ],
        )


def role_filter_echo(query_filter: RoleFilter | None) -> dict[str, Any] | None:
    """R: Client-facing part of the applied filter; the institution scope is never echoed."""
    if query_filter is None or (query_filter.name is None and not query_filter.statuses):
        return None
    return {
        "name": query_filter.name,
        "statuses": sorted(s.value for s in query_filter.statuses)
        if query_filter.statuses
        else None,
    }


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------


class AssignmentFilterReq(BaseModel):
    statuses: list[AssignmentStatus] | None = Field(None, min_length=1)
    phone_number: PhoneNumberModel | None = None

    def to_domain(self) -> AssignmentFilter:
        return AssignmentFilter(
            statuses=frozenset(self.statuses) if self.statuses else None,
            phone_number=self.phone_number.to_domain() if self.phone_number else None,
        )


class AssignmentListReq(ListReq):
    SORTABLE: ClassVar[frozenset[str]] = frozenset(
        {"created_at", "status", "first_name", "last_name", "description"}
    )

    filter: AssignmentFilterReq | None = None


class AssignmentRes(BaseModel):
    id: UUID
    description: str
    first_name: str
    last_name: str
    phone_number: PhoneNumberModel
    latitude: float
    longitude: float
    status: AssignmentStatus
    user_id: UUID | None = None
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, assignment: Assignment) -> AssignmentRes:
        return cls(
            id=assignment.id,
            description=assignment.description,
            first_name=assignment.first_name,
            last_name=assignment.last_name,
            phone_number=PhoneNumberModel.from_domain(assignment.phone_number),
            latitude=assignment.point.latitude,
            longitude=assignment.point.longitude,
            status=assignment.status,
            user_id=assignment.user_id,
            created_at=assignment.created_at,
        )


def assignment_filter_echo(query_filter: AssignmentFilter | None) -> dict[str, Any] | None:
    if query_filter is None or (
        query_filter.phone_number is None and not query_filter.statuses
    ):
        return None
    phone = query_filter.phone_number
    return {
        "statuses": sorted(s.value for s in query_filter.statuses)
        if query_filter.statuses
        else None,
        "phone_number": (
            {"country_code": phone.country_code, "line_number": phone.line_number}
            if phone
            else None
        ),
    }


# ---------------------------------------------------------------------------
# Institutions, users, authentication
# ---------------------------------------------------------------------------


class InstitutionSummaryRes(BaseModel):
    id: UUID
    name: str

    @classmethod
    def from_domain(cls, institution: Institution) -> InstitutionSummaryRes:
        return cls(id=institution.id, name=institution.name)


class CreateUserReq(BaseModel):
    email_address: str = Field(
        ..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$"
    )
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    phone_number: PhoneNumberModel | None = None
    city: str | None = Field(None, min_length=2, max_length=100)
    role_ids: list[UUID] = Field(..., min_length=1)


class UserRes(BaseModel):
    id: UUID
    email_address: str
    first_name: str
    last_name: str
    status: UserStatus
    role_ids: list[UUID]
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, user: User) -> UserRes:
        return cls(
            id=user.id,
            email_address=user.email_address,
            first_name=user.first_name,
            last_name=user.last_name,
            status=user.status,
            role_ids=sorted((role.id for role in user.roles), key=str),
            created_at=user.created_at,
        )


class TokenReq(BaseModel):
    email_address: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128, repr=False)


class TokenRes(BaseModel):
    access_token: str
    token_type: str
    expires_at: datetime
