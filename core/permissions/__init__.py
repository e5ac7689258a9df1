"""
Manara Permissions - Public API
=================================
"""

from core.permissions.evaluator import (
    ALLOWED_OPERATION_TYPES,
    PermissionChecker,
    PermissionContext,
    RolePermissionPolicy,
    require_permission,
)
from core.permissions.models import AppView, PermissionAction, User, UserRole
from core.permissions.provider import (
    DEFAULT_ROLE_MATRIX,
    InMemoryRoleMatrix,
    RoleMatrixProvider,
)

__all__ = [
    "ALLOWED_OPERATION_TYPES",
    "AppView",
    "DEFAULT_ROLE_MATRIX",
    "InMemoryRoleMatrix",
    "PermissionAction",
    "PermissionChecker",
    "PermissionContext",
    "RoleMatrixProvider",
    "RolePermissionPolicy",
    "User",
    "UserRole",
    "require_permission",
]
