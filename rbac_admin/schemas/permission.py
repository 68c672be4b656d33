import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class PermissionCreate(BaseModel):
    resource_name: str = Field(min_length=1)
    action_name: str = Field(min_length=1)
    description: str | None = None


class PermissionUpdate(BaseModel):
    description: str | None = None


class PermissionResponse(BaseModel):
    id: uuid.UUID
    name: str
    resource_name: str
    action_name: str
    description: str | None = None
    created_at: datetime
