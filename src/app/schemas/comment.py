from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    comment: str = Field(min_length=1, max_length=5000)
    position_x: float | None = None
    position_y: float | None = None


class CommentRead(BaseModel):
    id: UUID
    layout_id: UUID
    user_id: UUID
    comment: str
    position_x: float | None
    position_y: float | None
    resolved: bool
    created_at: datetime

    model_config = {"from_attributes": True}
