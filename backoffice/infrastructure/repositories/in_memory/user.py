"""
Name: In-Memory User Repository

Responsibilities:
  - Store users (with password, login attempt, roles) in memory
  - Email lookup is case-insensitive

Constraints:
  - Thread-safe: access guarded by Lock
  - Email is unique across users, like users_email_uq in PostgreSQL
  - Concurrent saves of the same user are last-write-wins
"""

from threading import Lock
from typing import Dict, Iterable, Optional
from uuid import UUID

from ....domain.entities import User
from ....exceptions import UserAlreadyExistsByEmailError


class InMemoryUserRepository:
    def __init__(self, users: Iterable[User] = ()) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {u.id: u for u in users}

    def _find_by_email(self, normalized: str) -> Optional[User]:
        # R: Caller holds the lock
        for user in self._users.values():
            if user.email_address.lower() == normalized:
                return user
        return None

    def find_by_email_address(self, email_address: str) -> Optional[User]:
        with self._lock:
            return self._find_by_email(email_address.strip().lower())

    def exists_by_email_address(self, email_address: str) -> bool:
        return self.find_by_email_address(email_address) is not None

    def find_by_id_and_institution_id(
        self, user_id: UUID, institution_id: UUID
    ) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
        if user is None or user.institution_id != institution_id:
            return None
        return user

    def save(self, user: User) -> None:
        with self._lock:
            owner = self._find_by_email(user.email_address.strip().lower())
            if owner is not None and owner.id != user.id:
                raise UserAlreadyExistsByEmailError(user.email_address)
            self._users[user.id] = user
