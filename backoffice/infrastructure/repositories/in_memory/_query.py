"""
Name: In-Memory Query Evaluation

Responsibilities:
  - Evaluate storage-neutral criteria against entities
  - Resolve sort properties to comparable values

Constraints:
  - Unknown sort properties are a programming error (PreconditionViolationError)
  - CONTAINS is case-insensitive, matching the PostgreSQL ILIKE rendering
"""

from enum import Enum
from typing import Any, Iterable, TypeVar

from ....domain.entities import PhoneNumber
from ....domain.filters import Criterion, Operator
from ....exceptions import PreconditionViolationError

T = TypeVar("T")


def _comparable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, PhoneNumber):
        return str(value)
    return value


def matches(item: Any, criteria: Iterable[Criterion]) -> bool:
    """R: True when every criterion holds (AND)."""
    for criterion in criteria:
        actual = getattr(item, criterion.field)
        if criterion.operator == Operator.EQ:
            if actual != criterion.value:
                return False
        elif criterion.operator == Operator.IN:
            if actual not in criterion.value:
                return False
        elif criterion.operator == Operator.CONTAINS:
            if actual is None or str(criterion.value).lower() not in str(actual).lower():
                return False
    return True


def key_resolver(sortable: frozenset[str]):
    """R: Build a key_of(item, property) bound to an allowlist."""

    def key_of(item: Any, prop: str) -> Any:
        if prop not in sortable:
            raise PreconditionViolationError(f"unsupported sort property! property:{prop}")
        return _comparable(getattr(item, prop))

    return key_of
