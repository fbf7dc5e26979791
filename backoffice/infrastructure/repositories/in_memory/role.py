"""
Name: In-Memory Role Repository

Responsibilities:
  - Store roles in memory (tests / local dev)
  - Filtered, paged listing with the same semantics as PostgreSQL

Collaborators:
  - domain.repositories.RoleRepository (contract)
  - pagination.paginate

Constraints:
  - Thread-safe: access guarded by Lock
  - Insertion order is the storage-defined order when no sort is requested
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Optional
from uuid import UUID

from ....domain.entities import Role
from ....domain.filters import RoleFilter
from ....pagination import Order, Page, Pageable, paginate, sort_items
from ._query import key_resolver, matches

SORTABLE_PROPERTIES = frozenset({"name", "status", "created_at"})


class InMemoryRoleRepository:
    """R: Roles keyed by id; dict order doubles as insertion order."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._roles: Dict[UUID, Role] = {}
        self._key_of = key_resolver(SORTABLE_PROPERTIES)

    def find_all(self, pageable: Pageable, query_filter: RoleFilter) -> Page[Role]:
        criteria = query_filter.criteria()
        with self._lock:
            candidates = [r for r in self._roles.values() if matches(r, criteria)]
        raw_page = paginate(candidates, pageable, self._key_of)
        return Page.of_filtered(query_filter, raw_page, list(raw_page.content))

    def find_all_by_institution_id(self, institution_id: UUID) -> list[Role]:
        with self._lock:
            roles = [r for r in self._roles.values() if r.institution_id == institution_id]
        return sort_items(roles, (Order("name"),), self._key_of)

    def find_by_id_and_institution_id(
        self, role_id: UUID, institution_id: UUID
    ) -> Optional[Role]:
        with self._lock:
            role = self._roles.get(role_id)
        if role is None or role.institution_id != institution_id:
            return None
        return role

    def exists_by_name_and_institution_id(self, name: str, institution_id: UUID) -> bool:
        normalized = name.strip().lower()
        with self._lock:
            return any(
                r.institution_id == institution_id and r.name.lower() == normalized
                for r in self._roles.values()
            )

    def save(self, role: Role) -> None:
        with self._lock:
            self._roles[role.id] = role
