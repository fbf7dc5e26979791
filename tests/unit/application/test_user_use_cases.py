"""
Name: User and Authentication Use Case Tests

Responsibilities:
  - UpdateUserStatusUseCase gating (DELETED is terminal, repeats conflict)
  - AuthenticateUserUseCase credential checks, claims and login recording
  - CreateUserUseCase email uniqueness and institution-scoped roles
"""

from unittest.mock import Mock
from uuid import uuid4

import pytest

from backoffice.application.use_cases import (
    AuthenticateUserInput,
    AuthenticateUserUseCase,
    CreateUserInput,
    CreateUserUseCase,
    UpdateUserStatusUseCase,
)
from backoffice.domain.entities import PhoneNumber, RoleStatus, User, UserStatus
from backoffice.domain.services import AccessToken, PasswordHasher, TokenIssuer
from backoffice.exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    InstitutionNotExistError,
    PreconditionViolationError,
    RoleNotExistError,
    UserAlreadyActiveError,
    UserAlreadyDeletedError,
    UserAlreadyExistsByEmailError,
    UserAlreadyPassiveError,
    UserNotActiveError,
    UserNotExistError,
)
from tests.factories import make_permission, make_role, make_user

pytestmark = pytest.mark.unit


class TestUpdateUserStatus:
    @pytest.mark.parametrize(
        "current, target",
        [
            (UserStatus.ACTIVE, UserStatus.PASSIVE),
            (UserStatus.PASSIVE, UserStatus.ACTIVE),
            (UserStatus.NOT_VERIFIED, UserStatus.ACTIVE),
            (UserStatus.ACTIVE, UserStatus.DELETED),
        ],
    )
    def test_allowed(self, institution, mock_user_repository, current, target):
        user = make_user(institution=institution, status=current)
        mock_user_repository.find_by_id_and_institution_id.return_value = user

        updated = UpdateUserStatusUseCase(mock_user_repository).execute(
            user.id, institution.id, target
        )

        assert updated.status == target
        mock_user_repository.save.assert_called_once_with(updated)

    @pytest.mark.parametrize(
        "current, target, error",
        [
            (UserStatus.ACTIVE, UserStatus.ACTIVE, UserAlreadyActiveError),
            (UserStatus.PASSIVE, UserStatus.PASSIVE, UserAlreadyPassiveError),
            (UserStatus.DELETED, UserStatus.ACTIVE, UserAlreadyDeletedError),
            (UserStatus.DELETED, UserStatus.PASSIVE, UserAlreadyDeletedError),
        ],
    )
    def test_rejected(self, institution, mock_user_repository, current, target, error):
        user = make_user(institution=institution, status=current)
        mock_user_repository.find_by_id_and_institution_id.return_value = user

        with pytest.raises(error):
            UpdateUserStatusUseCase(mock_user_repository).execute(
                user.id, institution.id, target
            )

        mock_user_repository.save.assert_not_called()

    def test_unknown_user(self, institution, mock_user_repository):
        mock_user_repository.find_by_id_and_institution_id.return_value = None

        with pytest.raises(UserNotExistError):
            UpdateUserStatusUseCase(mock_user_repository).execute(
                uuid4(), institution.id, UserStatus.ACTIVE
            )


@pytest.fixture
def password_hasher() -> Mock:
    hasher = Mock(spec=PasswordHasher)
    hasher.verify.return_value = True
    return hasher


@pytest.fixture
def token_issuer(fixed_login_at) -> Mock:
    issuer = Mock(spec=TokenIssuer)
    issuer.issue.return_value = AccessToken(
        access_token="signed.jwt.token", expires_at=fixed_login_at
    )
    return issuer


@pytest.fixture
def authenticate(mock_user_repository, password_hasher, token_issuer):
    return AuthenticateUserUseCase(
        repository=mock_user_repository,
        password_hasher=password_hasher,
        token_issuer=token_issuer,
    )


class TestAuthenticateUser:
    def test_success_issues_token_from_previous_login(
        self, institution, fixed_login_at, authenticate, mock_user_repository, token_issuer
    ):
        role = make_role(
            institution_id=institution.id, permissions=(make_permission("role:list"),)
        )
        user = make_user(institution=institution, roles=(role,), last_login_at=fixed_login_at)
        mock_user_repository.find_by_email_address.return_value = user

        token = authenticate.execute(
            AuthenticateUserInput(email_address=" Ada@Example.org ", password="pw")
        )

        assert token.access_token == "signed.jwt.token"
        mock_user_repository.find_by_email_address.assert_called_once_with("ada@example.org")

        claims = token_issuer.issue.call_args[0][0]
        assert claims["userLastLoginAt"] == fixed_login_at
        assert claims["userPermissions"] == frozenset({"role:list"})

        mock_user_repository.save.assert_called_once()
        saved = mock_user_repository.save.call_args[0][0]
        assert saved.id == user.id
        assert saved.login_attempt.last_login_at > fixed_login_at

    def test_first_login_has_no_last_login_claim(
        self, institution, authenticate, mock_user_repository, token_issuer
    ):
        mock_user_repository.find_by_email_address.return_value = make_user(
            institution=institution
        )

        authenticate.execute(AuthenticateUserInput(email_address="ada@example.org", password="pw"))

        assert "userLastLoginAt" not in token_issuer.issue.call_args[0][0]

    def test_unknown_email_and_wrong_password_fail_alike(
        self, institution, authenticate, mock_user_repository, password_hasher
    ):
        mock_user_repository.find_by_email_address.return_value = None
        with pytest.raises(AuthenticationError) as unknown:
            authenticate.execute(AuthenticateUserInput(email_address="x@y.z", password="pw"))

        mock_user_repository.find_by_email_address.return_value = make_user(
            institution=institution
        )
        password_hasher.verify.return_value = False
        with pytest.raises(AuthenticationError) as wrong:
            authenticate.execute(AuthenticateUserInput(email_address="x@y.z", password="bad"))

        assert unknown.value.message == wrong.value.message
        mock_user_repository.save.assert_not_called()

    def test_unknown_email_still_verifies_a_password(
        self, authenticate, mock_user_repository, password_hasher
    ):
        mock_user_repository.find_by_email_address.return_value = None
        password_hasher.hash.return_value = "$argon2id$placeholder"

        for _ in range(2):
            with pytest.raises(AuthenticationError):
                authenticate.execute(
                    AuthenticateUserInput(email_address="nobody@example.org", password="pw")
                )

        assert password_hasher.verify.call_count == 2
        password_hasher.verify.assert_called_with("pw", "$argon2id$placeholder")
        password_hasher.hash.assert_called_once()

    def test_user_without_password_fails_as_credentials(
        self, institution, authenticate, mock_user_repository, password_hasher
    ):
        mock_user_repository.find_by_email_address.return_value = User.create(
            email_address="new@example.org",
            first_name="New",
            last_name="User",
            institution=institution,
            roles=(),
        )

        with pytest.raises(AuthenticationError, match="invalid email address or password"):
            authenticate.execute(
                AuthenticateUserInput(email_address="new@example.org", password="pw")
            )

        password_hasher.verify.assert_called_once()
        mock_user_repository.save.assert_not_called()

    @pytest.mark.parametrize(
        "status", [UserStatus.PASSIVE, UserStatus.DELETED, UserStatus.NOT_VERIFIED]
    )
    def test_inactive_user_rejected(
        self, institution, authenticate, mock_user_repository, token_issuer, status
    ):
        mock_user_repository.find_by_email_address.return_value = make_user(
            institution=institution, status=status
        )

        with pytest.raises(UserNotActiveError):
            authenticate.execute(
                AuthenticateUserInput(email_address="ada@example.org", password="pw")
            )

        token_issuer.issue.assert_not_called()
        mock_user_repository.save.assert_not_called()

    def test_user_without_institution_is_precondition_violation(
        self, authenticate, mock_user_repository
    ):
        mock_user_repository.find_by_email_address.return_value = make_user(institution=None)

        with pytest.raises(PreconditionViolationError):
            authenticate.execute(
                AuthenticateUserInput(email_address="ada@example.org", password="pw")
            )

        mock_user_repository.save.assert_not_called()

    def test_password_not_in_input_repr(self):
        assert "s3cret" not in repr(AuthenticateUserInput(email_address="a@b.c", password="s3cret"))


class TestCreateUser:
    @pytest.fixture
    def create_user(
        self, mock_user_repository, mock_role_repository, mock_institution_repository
    ):
        return CreateUserUseCase(
            user_repository=mock_user_repository,
            role_repository=mock_role_repository,
            institution_repository=mock_institution_repository,
        )

    def _input(self, institution, *role_ids, email="Grace@Example.org ") -> CreateUserInput:
        return CreateUserInput(
            email_address=email,
            first_name="Grace",
            last_name="Hopper",
            institution_id=institution.id,
            role_ids=list(role_ids),
            phone_number=PhoneNumber(country_code="90", line_number="5551112233"),
        )

    def test_creates_not_verified_user_with_institution_roles(
        self,
        institution,
        create_user,
        mock_user_repository,
        mock_role_repository,
        mock_institution_repository,
    ):
        role = make_role(institution_id=institution.id)
        mock_user_repository.exists_by_email_address.return_value = False
        mock_institution_repository.find_by_id.return_value = institution
        mock_role_repository.find_by_id_and_institution_id.return_value = role

        user = create_user.execute(self._input(institution, role.id, role.id))

        mock_user_repository.exists_by_email_address.assert_called_once_with(
            "grace@example.org"
        )
        mock_role_repository.find_by_id_and_institution_id.assert_called_once_with(
            role.id, institution.id
        )
        mock_user_repository.save.assert_called_once_with(user)
        assert user.email_address == "grace@example.org"
        assert user.status == UserStatus.NOT_VERIFIED
        assert user.password is None
        assert user.institution_id == institution.id
        assert user.roles == frozenset({role})
        assert user.login_attempt.last_login_at is None

    def test_duplicate_email_is_already_exists(
        self, institution, create_user, mock_user_repository, mock_institution_repository
    ):
        mock_user_repository.exists_by_email_address.return_value = True

        with pytest.raises(UserAlreadyExistsByEmailError) as error:
            create_user.execute(self._input(institution, uuid4()))

        assert isinstance(error.value, AlreadyExistsError)
        assert "grace@example.org" in error.value.message
        mock_institution_repository.find_by_id.assert_not_called()
        mock_user_repository.save.assert_not_called()

    @pytest.mark.parametrize("role_status", [None, RoleStatus.PASSIVE])
    def test_missing_or_inactive_role_is_not_exist(
        self,
        institution,
        create_user,
        mock_user_repository,
        mock_role_repository,
        mock_institution_repository,
        role_status,
    ):
        mock_user_repository.exists_by_email_address.return_value = False
        mock_institution_repository.find_by_id.return_value = institution
        mock_role_repository.find_by_id_and_institution_id.return_value = (
            make_role(institution_id=institution.id, status=role_status)
            if role_status
            else None
        )

        with pytest.raises(RoleNotExistError):
            create_user.execute(self._input(institution, uuid4()))

        mock_user_repository.save.assert_not_called()

    def test_unknown_institution(
        self, institution, create_user, mock_user_repository, mock_institution_repository
    ):
        mock_user_repository.exists_by_email_address.return_value = False
        mock_institution_repository.find_by_id.return_value = None

        with pytest.raises(InstitutionNotExistError):
            create_user.execute(self._input(institution, uuid4()))
