"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (APP_ENV=test, no .env file)
  - Provide shared domain fixtures
  - Provide Mock(spec=...) repositories for use case tests

Collaborators:
  - pytest: Test framework
  - unittest.mock: Mocking library
  - backoffice.domain: Domain entities and protocols

Notes:
  - Fixtures are auto-discovered by pytest
  - Object builders live in tests/factories.py
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import Mock
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")

from backoffice import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from backoffice.domain.entities import Institution  # noqa: E402
from backoffice.domain.repositories import (  # noqa: E402
    AssignmentRepository,
    InstitutionRepository,
    PermissionRepository,
    RoleRepository,
    UserRepository,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def institution() -> Institution:
    return Institution(id=uuid4(), name="Volunteer Foundation")


@pytest.fixture
def other_institution() -> Institution:
    return Institution(id=uuid4(), name="Other Foundation")


@pytest.fixture
def fixed_login_at() -> datetime:
    return datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


# ============================================================================
# Mock Repository Fixtures
# ============================================================================


@pytest.fixture
def mock_role_repository() -> Mock:
    return Mock(spec=RoleRepository)


@pytest.fixture
def mock_permission_repository() -> Mock:
    return Mock(spec=PermissionRepository)


@pytest.fixture
def mock_user_repository() -> Mock:
    return Mock(spec=UserRepository)


@pytest.fixture
def mock_assignment_repository() -> Mock:
    return Mock(spec=AssignmentRepository)


@pytest.fixture
def mock_institution_repository() -> Mock:
    return Mock(spec=InstitutionRepository)
