from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, model_validator

from src.app.models.enums import SharePermission


class ShareCreate(BaseModel):
    """Share target: exactly one of user or team."""

    shared_with_user_id: UUID | None = None
    shared_with_team_id: UUID | None = None
    permissions: SharePermission = SharePermission.VIEWER

    @model_validator(mode="after")
    def validate_single_target(self) -> "ShareCreate":
        if (self.shared_with_user_id is None) == (self.shared_with_team_id is None):
            raise ValueError("Provide exactly one of shared_with_user_id or shared_with_team_id")
        return self


class ShareRead(BaseModel):
    id: UUID
    layout_id: UUID
    shared_by_user_id: UUID
    shared_with_user_id: UUID | None
    shared_with_team_id: UUID | None
    permissions: SharePermission
    shared_at: datetime

    model_config = {"from_attributes": True}
