"""
Name: Identity Edge (Argon2 + JWT)

Responsibilities:
  - Hash and verify passwords with Argon2 (PasswordHasher port)
  - Sign session claims into HS256 access tokens (TokenIssuer port)
  - Decode access tokens into the caller Identity
  - Expose FastAPI dependencies (require_identity, require_permission)

Collaborators:
  - config.get_settings: secret, TTL, issuer
  - domain.claims.TokenClaim: claim names shared with the claims builder
  - api/error_responses: unauthorized / forbidden
  - context.institution_id_var: tenant for log enrichment

Constraints:
  - Cryptography lives here, never in domain
  - Never log tokens or hashes
  - Tokens carry the claims map plus sub, iat, exp, iss, typ, ver
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Mapping
from uuid import UUID

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Header

from ..api.error_responses import forbidden, unauthorized
from ..config import get_settings
from ..context import institution_id_var
from ..domain.claims import CLAIMS_VERSION, TokenClaim
from ..domain.services import AccessToken
from ..logger import logger

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_ISS: str = "iss"
CLAIM_TYP: str = "typ"
CLAIM_VER: str = "ver"

TOKEN_TYPE_ACCESS: str = "access"


class Permissions(str, Enum):
    """Permission names checked by the HTTP layer."""

    ROLE_CREATE = "role:create"
    ROLE_LIST = "role:list"
    ROLE_DETAIL = "role:detail"
    ROLE_UPDATE = "role:update"
    ROLE_DELETE = "role:delete"
    ASSIGNMENT_LIST = "assignment:list"
    ASSIGNMENT_DETAIL = "assignment:detail"
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"


@dataclass(frozen=True, slots=True)
class Identity:
    """R: Authenticated caller as read from the access token."""

    user_id: UUID
    institution_id: UUID
    permissions: frozenset[str]

    def has_permission(self, name: str) -> bool:
        return name in self.permissions


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """Snapshot of auth settings."""

    jwt_secret: str
    jwt_access_ttl_minutes: int
    jwt_issuer: str


def get_auth_settings() -> AuthSettings:
    s = get_settings()
    return AuthSettings(
        jwt_secret=s.jwt_secret,
        jwt_access_ttl_minutes=s.jwt_access_ttl_minutes,
        jwt_issuer=s.jwt_issuer,
    )


# ---------------------------------------------------------------------------
# Passwords (Argon2)
# ---------------------------------------------------------------------------


class Argon2PasswordHasher:
    """R: PasswordHasher port backed by argon2-cffi."""

    def __init__(self, hasher: PasswordHasher | None = None):
        self._hasher = hasher or PasswordHasher()

    def hash(self, raw_password: str) -> str:
        return self._hasher.hash(raw_password)

    def verify(self, raw_password: str, hashed_value: str) -> bool:
        try:
            return self._hasher.verify(hashed_value, raw_password)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False


# ---------------------------------------------------------------------------
# Tokens (issue / decode)
# ---------------------------------------------------------------------------


def _json_claim(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


class JwtTokenIssuer:
    """R: TokenIssuer port signing HS256 JWTs."""

    def __init__(self, settings: AuthSettings | None = None):
        self._settings = settings

    def issue(self, claims: Mapping[str, Any]) -> AccessToken:
        auth_settings = self._settings or get_auth_settings()
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(minutes=auth_settings.jwt_access_ttl_minutes)

        payload: dict[str, Any] = {k: _json_claim(v) for k, v in claims.items()}
        payload.update(
            {
                CLAIM_SUB: payload.get(TokenClaim.USER_ID.value),
                CLAIM_IAT: int(now.timestamp()),
                CLAIM_EXP: int(expires_at.timestamp()),
                CLAIM_ISS: auth_settings.jwt_issuer,
                CLAIM_TYP: TOKEN_TYPE_ACCESS,
                CLAIM_VER: CLAIMS_VERSION,
            }
        )

        token = jwt.encode(payload, auth_settings.jwt_secret, algorithm=JWT_ALGORITHM)
        return AccessToken(access_token=token, expires_at=expires_at)


def decode_access_token(token: str, settings: AuthSettings | None = None) -> Identity:
    """
    R: Validate signature, expiry, issuer and type; return the caller Identity.

    Raises:
        AppHTTPException(401): expired, tampered or malformed token
    """
    auth_settings = settings or get_auth_settings()
    required = [
        CLAIM_EXP,
        TokenClaim.USER_ID.value,
        TokenClaim.INSTITUTION_ID.value,
        TokenClaim.USER_PERMISSIONS.value,
    ]

    try:
        payload = jwt.decode(
            token,
            auth_settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            issuer=auth_settings.jwt_issuer,
            options={"require": required},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Invalid token") from exc

    if payload.get(CLAIM_TYP) != TOKEN_TYPE_ACCESS:
        raise unauthorized("Invalid token type")

    permissions = payload.get(TokenClaim.USER_PERMISSIONS.value)
    if not isinstance(permissions, list):
        raise unauthorized("Invalid token")

    try:
        return Identity(
            user_id=UUID(str(payload[TokenClaim.USER_ID.value])),
            institution_id=UUID(str(payload[TokenClaim.INSTITUTION_ID.value])),
            permissions=frozenset(str(p) for p in permissions),
        )
    except ValueError as exc:
        raise unauthorized("Invalid token") from exc


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def _resolve_identity(authorization: str | None) -> Identity:
    token = _extract_bearer_token(authorization)
    if not token:
        raise unauthorized("Missing Bearer token")
    identity = decode_access_token(token)
    institution_id_var.set(str(identity.institution_id))
    return identity


def require_identity() -> Callable:
    """Dependency: caller authenticated by Bearer access token."""

    async def dependency(
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> Identity:
        return _resolve_identity(authorization)

    return dependency


def require_permission(permission: Permissions | str) -> Callable:
    """Dependency: caller holds the named permission."""
    required = Permissions(permission).value

    async def dependency(
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> Identity:
        identity = _resolve_identity(authorization)
        if not identity.has_permission(required):
            logger.warning(
                "Permission denied",
                extra={"user_id": str(identity.user_id), "permission": required},
            )
            raise forbidden(f"Missing permission: {required}")
        return identity

    return dependency
