from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(default="#6366f1", pattern=HEX_COLOR)
    description: str | None = Field(default=None, max_length=500)


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    color: str | None = Field(None, pattern=HEX_COLOR)
    description: str | None = Field(None, max_length=500)


class CategoryRead(BaseModel):
    id: UUID
    name: str
    color: str
    description: str | None
    owner_user_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    color: str = Field(default="#10b981", pattern=HEX_COLOR)
    description: str | None = Field(default=None, max_length=500)


class TagUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    color: str | None = Field(None, pattern=HEX_COLOR)
    description: str | None = Field(None, max_length=500)


class TagRead(BaseModel):
    id: UUID
    name: str
    color: str
    description: str | None
    owner_user_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class DeleteOutcome(str, Enum):
    DELETED = "deleted"
    ALREADY_DELETED = "already_deleted"


class TagDeleteResponse(BaseModel):
    outcome: DeleteOutcome
    detached_layouts: int = 0
