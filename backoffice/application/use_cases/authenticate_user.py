"""
Name: Authenticate User Use Case

Responsibilities:
  - Verify email + password and issue an access token
  - Record the successful login

Collaborators:
  - domain.repositories.UserRepository
  - domain.services.PasswordHasher, TokenIssuer
  - domain.claims.build_claims

Constraints:
  - Unknown email and wrong password fail identically (no user enumeration);
    an unknown email still pays one password verification
  - Claims are built before the login is recorded, so userLastLoginAt is
    the previous login
  - The login attempt is saved exactly once per successful call
"""

import secrets
from dataclasses import dataclass, field
from functools import lru_cache

from ...domain.claims import build_claims
from ...domain.repositories import UserRepository
from ...domain.services import AccessToken, PasswordHasher, TokenIssuer
from ...exceptions import AuthenticationError, UserNotActiveError
from ...logger import logger


@lru_cache(maxsize=4)
def _placeholder_hash(password_hasher: PasswordHasher) -> str:
    """R: Hash checked when no stored password exists; computed once per hasher."""
    return password_hasher.hash(secrets.token_urlsafe(32))


@dataclass
class AuthenticateUserInput:
    email_address: str
    password: str = field(repr=False)


class AuthenticateUserUseCase:
    """R: Exchange credentials for an access token."""

    def __init__(
        self,
        repository: UserRepository,
        password_hasher: PasswordHasher,
        token_issuer: TokenIssuer,
    ):
        self.repository = repository
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer

    def execute(self, input_data: AuthenticateUserInput) -> AccessToken:
        email = input_data.email_address.strip().lower()
        user = self.repository.find_by_email_address(email)
        stored = user.password if user is not None else None
        # R: Always verify once, so timing does not reveal whether the email exists
        verified = self.password_hasher.verify(
            input_data.password,
            stored.hashed_value
            if stored is not None
            else _placeholder_hash(self.password_hasher),
        )
        if stored is None or not verified:
            logger.warning("Authentication failed", extra={"reason": "credentials"})
            raise AuthenticationError("invalid email address or password!")

        if not user.is_active():
            logger.warning(
                "Authentication failed",
                extra={"reason": "status", "user_id": str(user.id)},
            )
            raise UserNotActiveError(user.id)

        claims = build_claims(user)
        self.repository.save(user.record_successful_login())
        token = self.token_issuer.issue(claims)
        logger.info("User authenticated", extra={"user_id": str(user.id)})
        return token
