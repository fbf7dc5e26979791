"""
Name: Session Claims Builder

Responsibilities:
  - Derive the claims map embedded in an access token from a User
  - Own the stable claim names (TokenClaim)

Collaborators:
  - domain.entities.User: source of identity, roles and last login
  - identity/auth_users.py: encodes the map into a signed token

Constraints:
  - Pure function, no I/O, safe to call concurrently
  - Never reads Password (credentials never leave the entity)
  - Claim names are a client contract; bump CLAIMS_VERSION on change

Notes:
  - userPermissions is a frozenset so consumers cannot rely on order
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from ..exceptions import PreconditionViolationError
from .entities import User

CLAIMS_VERSION = 1


class TokenClaim(str, Enum):
    INSTITUTION_ID = "institutionId"
    INSTITUTION_NAME = "institutionName"
    USER_ID = "userId"
    USER_FIRST_NAME = "userFirstName"
    USER_LAST_NAME = "userLastName"
    USER_EMAIL_ADDRESS = "userEmailAddress"
    USER_PERMISSIONS = "userPermissions"
    USER_LAST_LOGIN_AT = "userLastLoginAt"


def build_claims(user: User) -> dict[str, Any]:
    """
    R: Build the claims map for an authenticated user.

    Raises:
        PreconditionViolationError: user has no institution (storage invariant broken)
    """
    if user.institution is None:
        raise PreconditionViolationError(
            f"user has no institution! userId:{user.id}"
        )

    claims: dict[str, Any] = {
        TokenClaim.INSTITUTION_ID.value: user.institution.id,
        TokenClaim.INSTITUTION_NAME.value: user.institution.name,
        TokenClaim.USER_ID.value: user.id,
        TokenClaim.USER_FIRST_NAME.value: user.first_name,
        TokenClaim.USER_LAST_NAME.value: user.last_name,
        TokenClaim.USER_EMAIL_ADDRESS.value: user.email_address,
        TokenClaim.USER_PERMISSIONS.value: user.permission_names(),
    }

    attempt = user.login_attempt
    if attempt is not None and attempt.last_login_at is not None:
        claims[TokenClaim.USER_LAST_LOGIN_AT.value] = attempt.last_login_at

    return claims
