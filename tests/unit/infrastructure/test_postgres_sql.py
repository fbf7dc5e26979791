"""
Name: SQL Rendering Tests

Responsibilities:
  - WHERE rendering per operator, composite columns and escaping
  - ORDER BY rendering with NULL placement, id tiebreaker and default order
"""

from uuid import uuid4

import pytest

from backoffice.domain.entities import AssignmentStatus, PhoneNumber, RoleStatus
from backoffice.domain.filters import AssignmentFilter, Criterion, Operator, RoleFilter
from backoffice.exceptions import PreconditionViolationError
from backoffice.infrastructure.repositories.postgres import assignment, role
from backoffice.infrastructure.repositories.postgres._sql import (
    render_order_by,
    render_where,
)
from backoffice.pagination import Direction, Order

pytestmark = pytest.mark.unit


def test_empty_criteria_render_nothing():
    assert render_where([], role.FILTER_COLUMNS) == ("", [])


def test_role_filter_renders_and_ed_conditions():
    institution_id = uuid4()
    query_filter = RoleFilter(
        name="adm",
        statuses=frozenset({RoleStatus.PASSIVE, RoleStatus.ACTIVE}),
        institution_id=institution_id,
    )

    sql, params = render_where(query_filter.criteria(), role.FILTER_COLUMNS)

    assert sql == "WHERE institution_id = %s AND name ILIKE %s AND status = ANY(%s)"
    assert params == [institution_id, "%adm%", ["ACTIVE", "PASSIVE"]]


def test_contains_escapes_like_wildcards():
    _, params = render_where(
        [Criterion("name", Operator.CONTAINS, "50%_off")], role.FILTER_COLUMNS
    )
    assert params == ["%50\\%\\_off%"]


def test_phone_number_maps_to_two_columns():
    phone = PhoneNumber(country_code="90", line_number="5551112233")
    query_filter = AssignmentFilter(
        statuses=frozenset({AssignmentStatus.DONE}), phone_number=phone
    )

    sql, params = render_where(query_filter.criteria(), assignment.FILTER_COLUMNS)

    assert sql == (
        "WHERE status = ANY(%s) AND phone_country_code = %s AND phone_line_number = %s"
    )
    assert params == [["DONE"], "90", "5551112233"]


def test_unknown_filter_field():
    with pytest.raises(PreconditionViolationError):
        render_where([Criterion("password", Operator.EQ, "x")], role.FILTER_COLUMNS)


def test_default_order_is_id():
    assert render_order_by((), role.SORT_COLUMNS) == "ORDER BY id ASC"


def test_orders_keep_priority_and_null_placement():
    sql = render_order_by(
        (Order("status"), Order("created_at", Direction.DESC)), role.SORT_COLUMNS
    )
    assert sql == (
        "ORDER BY status ASC NULLS LAST, created_at DESC NULLS FIRST, id ASC"
    )


@pytest.mark.parametrize(
    "orders",
    [
        (Order("status"),),
        (Order("status"), Order("name")),
        (Order("name", Direction.DESC),),
    ],
)
def test_ties_are_broken_by_unique_id(orders):
    assert render_order_by(orders, role.SORT_COLUMNS).endswith(", id ASC")


def test_assignment_orders_end_on_id():
    sql = render_order_by((Order("first_name"),), assignment.SORT_COLUMNS)
    assert sql == "ORDER BY first_name ASC NULLS LAST, id ASC"


def test_unknown_sort_property():
    with pytest.raises(PreconditionViolationError):
        render_order_by((Order("name; DROP TABLE roles"),), role.SORT_COLUMNS)
