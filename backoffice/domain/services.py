"""
Name: Domain Service Interfaces

Responsibilities:
  - Define contracts for credential hashing and token issuance
  - Keep use cases independent of argon2 and JWT libraries

Collaborators:
  - Implementations in identity/auth_users.py

Constraints:
  - Pure interfaces (Protocol), no implementation
  - Must not leak library-specific exceptions
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Protocol


@dataclass(frozen=True, slots=True)
class AccessToken:
    """R: Issued token plus its expiry (UTC)."""

    access_token: str
    expires_at: datetime
    token_type: str = "Bearer"


class PasswordHasher(Protocol):
    def hash(self, raw_password: str) -> str:
        ...

    def verify(self, raw_password: str, hashed_value: str) -> bool:
        """R: False on mismatch or malformed hash; never raises for bad input."""
        ...


class TokenIssuer(Protocol):
    def issue(self, claims: Mapping[str, Any]) -> AccessToken:
        """R: Sign claims into an access token."""
        ...
