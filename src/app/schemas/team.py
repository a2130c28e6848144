from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.app.models.enums import InvitationStatus, TeamRole


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class TeamRead(BaseModel):
    id: UUID
    name: str
    description: str | None
    created_by_user_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class TeamMemberCreate(BaseModel):
    user_id: UUID
    role: TeamRole = TeamRole.MEMBER


class TeamMemberRead(BaseModel):
    id: UUID
    team_id: UUID
    user_id: UUID
    role: TeamRole
    joined_at: datetime

    model_config = {"from_attributes": True}


class InvitationCreate(BaseModel):
    invited_user_id: UUID
    role: TeamRole = TeamRole.MEMBER
    layout_id: UUID | None = None
    message: str | None = Field(default=None, max_length=1000)


class InvitationRead(BaseModel):
    id: UUID
    team_id: UUID
    invited_user_id: UUID
    invited_by_user_id: UUID
    role: TeamRole
    status: InvitationStatus
    layout_id: UUID | None
    message: str | None
    created_at: datetime
    responded_at: datetime | None

    model_config = {"from_attributes": True}


class InvitationResponse(BaseModel):
    accept: bool
