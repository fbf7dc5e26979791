"""
Name: Pagination Utilities

Responsibilities:
  - Describe a page request (Pageable, Order) and a page result (Page)
  - Convert a storage page into a domain Page with the same metadata
  - Provide the stable multi-key sort and slicing used by in-memory storage

Collaborators:
  - domain.repositories: ListPort returns Page
  - infrastructure.repositories: build StoragePage from rows
  - api/schemas.py: serializes Page

Constraints:
  - page_number is 1-based
  - total_page_count is never below 1, even for an empty result
  - Page metadata comes from storage; it is never recomputed from content

Notes:
  - Empty orders means storage-defined order
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Sequence, TypeVar

from .exceptions import PreconditionViolationError

T = TypeVar("T")
R = TypeVar("R")


class Direction(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True, slots=True)
class Order:
    """R: One sort key. The first Order in a Pageable is the primary key."""

    property: str
    direction: Direction = Direction.ASC


@dataclass(frozen=True, slots=True)
class Pageable:
    """R: Page request (1-based page number)."""

    page_number: int = 1
    page_size: int = 10
    orders: tuple[Order, ...] = ()

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


def total_page_count(total_element_count: int, page_size: int) -> int:
    return max(1, math.ceil(total_element_count / page_size))


@dataclass(frozen=True, slots=True)
class StoragePage(Generic[R]):
    """R: Raw page as returned by a storage adapter (rows + counts)."""

    content: Sequence[R]
    page_number: int
    page_size: int
    total_element_count: int
    orders: tuple[Order, ...] = ()

    @property
    def total_page_count(self) -> int:
        return total_page_count(self.total_element_count, self.page_size)


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """R: Domain page. Immutable after construction."""

    content: tuple[T, ...]
    page_number: int
    page_size: int
    total_element_count: int
    total_page_count: int
    orders: tuple[Order, ...] = ()
    filter: Any = field(default=None)

    @classmethod
    def of(cls, raw_page: StoragePage[Any], content: Sequence[T]) -> Page[T]:
        """
        R: Page carrying raw_page metadata and the mapped content.

        Raises:
            PreconditionViolationError: content and raw_page.content differ in length
        """
        if len(content) != len(raw_page.content):
            raise PreconditionViolationError(
                f"page content size mismatch! expected:{len(raw_page.content)} "
                f"actual:{len(content)}"
            )
        return cls._from_raw(raw_page, content, None)

    @classmethod
    def of_filtered(
        cls, query_filter: Any, raw_page: StoragePage[Any], content: Sequence[T]
    ) -> Page[T]:
        """R: Like `of`, echoing the filter. Content may be a subset of the raw rows."""
        return cls._from_raw(raw_page, content, query_filter)

    @classmethod
    def from_slice(
        cls,
        content: Sequence[T],
        pageable: Pageable,
        total_element_count: int,
        query_filter: Any = None,
    ) -> Page[T]:
        return cls(
            content=tuple(content),
            page_number=pageable.page_number,
            page_size=pageable.page_size,
            total_element_count=total_element_count,
            total_page_count=total_page_count(total_element_count, pageable.page_size),
            orders=pageable.orders,
            filter=query_filter,
        )

    @classmethod
    def _from_raw(
        cls, raw_page: StoragePage[Any], content: Sequence[T], query_filter: Any
    ) -> Page[T]:
        return cls(
            content=tuple(content),
            page_number=raw_page.page_number,
            page_size=raw_page.page_size,
            total_element_count=raw_page.total_element_count,
            total_page_count=raw_page.total_page_count,
            orders=raw_page.orders,
            filter=query_filter,
        )

    def map(self, fn: Callable[[T], R]) -> Page[R]:
        """R: Same metadata, content transformed element-wise."""
        return Page(
            content=tuple(fn(item) for item in self.content),
            page_number=self.page_number,
            page_size=self.page_size,
            total_element_count=self.total_element_count,
            total_page_count=self.total_page_count,
            orders=self.orders,
            filter=self.filter,
        )


# ---------------------------------------------------------------------------
# In-memory helpers
# ---------------------------------------------------------------------------


def sort_items(
    items: Sequence[T],
    orders: Sequence[Order],
    key_of: Callable[[T, str], Any],
) -> list[T]:
    """
    R: Stable multi-key sort, primary key first.

    None sorts last for ASC and first for DESC. Sorting runs from the last
    key to the first so earlier keys win and ties keep their prior order.
    """
    result = list(items)
    for order in reversed(orders):
        reverse = order.direction == Direction.DESC
        result.sort(
            key=lambda item: _none_aware(key_of(item, order.property)),
            reverse=reverse,
        )
    return result


def _none_aware(value: Any) -> tuple[bool, Any]:
    # R: (is_none, value) puts None after every value; reverse=True flips it first
    if value is None:
        return (True, 0)
    return (False, value)


def paginate(
    items: Sequence[T],
    pageable: Pageable,
    key_of: Callable[[T, str], Any],
) -> StoragePage[T]:
    """R: Sort then slice a full in-memory result into a StoragePage."""
    ordered = sort_items(items, pageable.orders, key_of)
    start = pageable.offset
    return StoragePage(
        content=ordered[start : start + pageable.page_size],
        page_number=pageable.page_number,
        page_size=pageable.page_size,
        total_element_count=len(ordered),
        orders=pageable.orders,
    )
