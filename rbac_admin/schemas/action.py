import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ActionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None


class ActionUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None


class ActionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime
