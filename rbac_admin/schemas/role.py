import uuid
from datetime import datetime

from pydantic import BaseModel

from rbac_admin.models.role import RoleName
from rbac_admin.schemas.permission import PermissionResponse


class RoleCreate(BaseModel):
    name: RoleName
    description: str | None = None


class RoleUpdate(BaseModel):
    name: RoleName | None = None
    description: str | None = None


class RoleResponse(BaseModel):
    id: uuid.UUID
    name: RoleName
    description: str | None = None
    permissions: list[PermissionResponse]
    total_users: int = 0
    created_at: datetime
