"""
Name: SQL Rendering for Listing Queries

Responsibilities:
  - Render storage-neutral criteria into a parameterized WHERE clause
  - Render Pageable orders into ORDER BY through a column allowlist, with
    the unique id as the final tiebreaker

Constraints:
  - Identifiers only ever come from the allowlists below each repository;
    values always travel as parameters
  - Composite values (PhoneNumber) map onto a tuple of columns
"""

from dataclasses import astuple
from enum import Enum
from typing import Any, Mapping, Sequence, Union

from ....domain.filters import Criterion, Operator
from ....exceptions import PreconditionViolationError
from ....pagination import Direction, Order

ColumnRef = Union[str, tuple[str, ...]]


def _param(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def render_where(
    criteria: Sequence[Criterion], columns: Mapping[str, ColumnRef]
) -> tuple[str, list[object]]:
    """
    R: Build "WHERE a AND b" (or "") plus its params.

    Raises:
        PreconditionViolationError: a criterion names a field with no column
    """
    conditions: list[str] = []
    params: list[object] = []

    for criterion in criteria:
        column = columns.get(criterion.field)
        if column is None:
            raise PreconditionViolationError(
                f"unsupported filter field! field:{criterion.field}"
            )

        if isinstance(column, tuple):
            if criterion.operator != Operator.EQ:
                raise PreconditionViolationError(
                    f"composite field supports EQ only! field:{criterion.field}"
                )
            parts = astuple(criterion.value)
            for name, part in zip(column, parts):
                conditions.append(f"{name} = %s")
                params.append(_param(part))
        elif criterion.operator == Operator.EQ:
            conditions.append(f"{column} = %s")
            params.append(_param(criterion.value))
        elif criterion.operator == Operator.IN:
            conditions.append(f"{column} = ANY(%s)")
            params.append(sorted(_param(v) for v in criterion.value))
        elif criterion.operator == Operator.CONTAINS:
            conditions.append(f"{column} ILIKE %s")
            params.append(f"%{_escape_like(str(criterion.value))}%")

    where_sql = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    return where_sql, params


def render_order_by(
    orders: Sequence[Order], columns: Mapping[str, str], unique_column: str = "id"
) -> str:
    """
    R: Build ORDER BY, always ending on unique_column ASC.

    NULLS LAST for ASC and NULLS FIRST for DESC, matching the in-memory sort.
    The trailing unique column breaks ties, so LIMIT/OFFSET pages never
    repeat or skip rows between requests.
    """
    parts: list[str] = []
    for order in orders:
        column = columns.get(order.property)
        if column is None:
            raise PreconditionViolationError(
                f"unsupported sort property! property:{order.property}"
            )
        if order.direction == Direction.DESC:
            parts.append(f"{column} DESC NULLS FIRST")
        else:
            parts.append(f"{column} ASC NULLS LAST")
    parts.append(f"{unique_column} ASC")
    return f"ORDER BY {', '.join(parts)}"
