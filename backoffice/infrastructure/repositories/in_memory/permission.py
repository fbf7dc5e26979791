"""
Name: In-Memory Permission Repository

Responsibilities:
  - Hold the permission catalogue in memory (tests / local dev)
"""

from threading import Lock
from typing import Dict, Iterable, Sequence
from uuid import UUID

from ....domain.entities import Permission


class InMemoryPermissionRepository:
    def __init__(self, permissions: Iterable[Permission] = ()) -> None:
        self._lock = Lock()
        self._permissions: Dict[UUID, Permission] = {p.id: p for p in permissions}

    def save_all(self, permissions: Sequence[Permission]) -> None:
        with self._lock:
            known = {p.name for p in self._permissions.values()}
            for permission in permissions:
                if permission.name not in known:
                    self._permissions[permission.id] = permission
                    known.add(permission.name)

    def find_all(self) -> list[Permission]:
        with self._lock:
            return list(self._permissions.values())

    def find_all_by_ids(self, permission_ids: Sequence[UUID]) -> list[Permission]:
        with self._lock:
            return [
                self._permissions[pid]
                for pid in dict.fromkeys(permission_ids)
                if pid in self._permissions
            ]
