"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .assignment import InMemoryAssignmentRepository
from .institution import InMemoryInstitutionRepository
from .permission import InMemoryPermissionRepository
from .role import InMemoryRoleRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryAssignmentRepository",
    "InMemoryInstitutionRepository",
    "InMemoryPermissionRepository",
    "InMemoryRoleRepository",
    "InMemoryUserRepository",
]
