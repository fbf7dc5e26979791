"""
Name: PostgreSQL User Repository

Responsibilities:
  - Load a User aggregate (institution, password, login attempt, roles)
  - Insert new users and persist status, role and login attempt changes
  - Email existence check (case-insensitive)

Collaborators:
  - postgres.role.PostgresRoleRepository: role + permission mapping
  - Tables: users, institutions, user_passwords, user_login_attempts, user_roles

Constraints:
  - save() writes a password only when none is stored yet
  - A users_email_uq violation surfaces as UserAlreadyExistsByEmailError
  - Concurrent saves of the same user are last-write-wins
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from psycopg.errors import UniqueViolation

from ....domain.entities import (
    Institution,
    InstitutionStatus,
    LoginAttempt,
    Password,
    PhoneNumber,
    User,
    UserStatus,
)
from ....exceptions import UserAlreadyExistsByEmailError
from ....logger import logger
from ._base import PostgresRepository
from .role import PostgresRoleRepository


class PostgresUserRepository(PostgresRepository):
    """R: PostgreSQL implementation of UserRepository."""

    _SELECT = """
        SELECT u.id, u.email_address, u.first_name, u.last_name,
               u.phone_country_code, u.phone_line_number, u.city, u.status,
               u.created_at,
               i.id, i.name, i.status,
               pw.id, pw.hashed_value,
               la.id, la.last_login_at
        FROM users u
        LEFT JOIN institutions i ON i.id = u.institution_id
        LEFT JOIN user_passwords pw ON pw.user_id = u.id
        LEFT JOIN user_login_attempts la ON la.user_id = u.id
    """

    def _roles_of(self, user_id: UUID):
        rows = self._fetchall(
            query="""
                SELECT r.id, r.institution_id, r.name, r.status, r.created_at
                FROM user_roles ur
                JOIN roles r ON r.id = ur.role_id
                WHERE ur.user_id = %s
            """,
            params=[user_id],
            context_msg="PostgresUserRepository: Failed to load user roles",
            extra={"user_id": str(user_id)},
        )
        return PostgresRoleRepository(pool=self._pool)._rows_to_roles(rows)

    def _row_to_user(self, row: tuple) -> User:
        (
            user_id,
            email_address,
            first_name,
            last_name,
            country_code,
            line_number,
            city,
            status,
            created_at,
            institution_id,
            institution_name,
            institution_status,
            password_id,
            hashed_value,
            attempt_id,
            last_login_at,
        ) = row

        phone_number = None
        if country_code and line_number:
            phone_number = PhoneNumber(country_code=country_code, line_number=line_number)

        institution = None
        if institution_id is not None:
            institution = Institution(
                id=institution_id,
                name=institution_name,
                status=InstitutionStatus(institution_status),
            )

        return User(
            id=user_id,
            email_address=email_address,
            first_name=first_name,
            last_name=last_name,
            status=UserStatus(status),
            phone_number=phone_number,
            city=city,
            password=(
                Password(id=password_id, hashed_value=hashed_value)
                if password_id is not None
                else None
            ),
            login_attempt=(
                LoginAttempt(id=attempt_id, last_login_at=last_login_at)
                if attempt_id is not None
                else None
            ),
            roles=frozenset(self._roles_of(user_id)),
            institution=institution,
            created_at=created_at,
        )

    def find_by_email_address(self, email_address: str) -> Optional[User]:
        row = self._fetchone(
            query=f"{self._SELECT} WHERE lower(u.email_address) = lower(%s)",
            params=[email_address.strip()],
            context_msg="PostgresUserRepository: Failed to get user by email",
            extra={},
        )
        return self._row_to_user(row) if row else None

    def find_by_id_and_institution_id(
        self, user_id: UUID, institution_id: UUID
    ) -> Optional[User]:
        row = self._fetchone(
            query=f"{self._SELECT} WHERE u.id = %s AND u.institution_id = %s",
            params=[user_id, institution_id],
            context_msg="PostgresUserRepository: Failed to get user",
            extra={"user_id": str(user_id)},
        )
        return self._row_to_user(row) if row else None

    def exists_by_email_address(self, email_address: str) -> bool:
        row = self._fetchone(
            query="""
                SELECT EXISTS (
                    SELECT 1 FROM users WHERE lower(email_address) = lower(%s)
                )
            """,
            params=[email_address.strip()],
            context_msg="PostgresUserRepository: Failed to check user email",
            extra={},
        )
        return bool(row and row[0])

    def save(self, user: User) -> None:
        phone = user.phone_number
        try:
            with self._get_pool().connection() as conn:
                with conn.transaction():
                    conn.execute(
                        """
                        INSERT INTO users (
                            id, institution_id, email_address, first_name, last_name,
                            phone_country_code, phone_line_number, city, status,
                            created_at
                        )
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, COALESCE(%s, now()))
                        ON CONFLICT (id) DO UPDATE
                        SET status = EXCLUDED.status,
                            updated_at = now()
                        """,
                        (
                            user.id,
                            user.institution_id,
                            user.email_address,
                            user.first_name,
                            user.last_name,
                            phone.country_code if phone else None,
                            phone.line_number if phone else None,
                            user.city,
                            user.status.value,
                            user.created_at,
                        ),
                    )
                    if user.password is not None:
                        conn.execute(
                            """
                            INSERT INTO user_passwords (id, user_id, hashed_value)
                            VALUES (%s, %s, %s)
                            ON CONFLICT (user_id) DO NOTHING
                            """,
                            (user.password.id, user.id, user.password.hashed_value),
                        )
                    attempt = user.login_attempt
                    if attempt is not None:
                        conn.execute(
                            """
                            INSERT INTO user_login_attempts (id, user_id, last_login_at)
                            VALUES (%s, %s, %s)
                            ON CONFLICT (user_id) DO UPDATE
                            SET last_login_at = EXCLUDED.last_login_at
                            """,
                            (attempt.id, user.id, attempt.last_login_at),
                        )
                    conn.execute("DELETE FROM user_roles WHERE user_id = %s", (user.id,))
                    with conn.cursor() as cur:
                        cur.executemany(
                            "INSERT INTO user_roles (user_id, role_id) VALUES (%s, %s)",
                            [(user.id, role.id) for role in user.roles],
                        )
        except UniqueViolation as exc:
            logger.warning(
                "PostgresUserRepository: Email already taken",
                extra={"user_id": str(user.id)},
            )
            raise UserAlreadyExistsByEmailError(user.email_address) from exc
        except Exception as exc:
            raise self._fail(
                "PostgresUserRepository: Failed to save user",
                exc,
                {"user_id": str(user.id)},
            ) from exc
