"""Permission system for role-based access control (RBAC)."""

from bookshelf.core.permissions.assignments import RoleAssignmentRepository
from bookshelf.core.permissions.catalog import PermissionCatalog
from bookshelf.core.permissions.dependencies import (
    Gate,
    get_authorization_engine,
    require_permission,
)
from bookshelf.core.permissions.engine import AuthorizationEngine, is_system_actor
from bookshelf.core.permissions.gate import AuthorizationDenied, AuthorizationGate
from bookshelf.core.permissions.models import (
    Permission,
    Role,
    UserRole,
    role_permissions,
)


__all__ = [
    # Engine
    "AuthorizationDenied",
    "AuthorizationEngine",
    "AuthorizationGate",
    # Dependencies
    "Gate",
    # Models
    "Permission",
    # Data access
    "PermissionCatalog",
    "Role",
    "RoleAssignmentRepository",
    "UserRole",
    "get_authorization_engine",
    "is_system_actor",
    "require_permission",
    "role_permissions",
]
