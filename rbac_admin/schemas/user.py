import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from rbac_admin.models.role import DEFAULT_ROLE, RoleName


class UserCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6)
    role: RoleName = DEFAULT_ROLE


class UserUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)
    role: RoleName | None = None


class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    full_name: str
    role_name: RoleName
    role_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
