from rbac_admin.models.action import Action
from rbac_admin.models.permission import Permission, role_permissions
from rbac_admin.models.resource import Resource
from rbac_admin.models.role import DEFAULT_ROLE, Role, RoleName
from rbac_admin.models.user import User

__all__ = [
    "Action", "DEFAULT_ROLE", "Permission", "Resource", "Role", "RoleName", "User",
    "role_permissions",
]
