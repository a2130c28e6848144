"""Team models - teams, memberships and invitations."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now
from src.app.models.enums import InvitationStatus, TeamRole


class Team(SQLModel, table=True):
    """A team. The creator holds admin authority without a membership row."""

    __tablename__ = "teams"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    created_by_user_id: UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)


class TeamMember(SQLModel, table=True):
    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID = Field(foreign_key="teams.id", index=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    role: str = Field(default=TeamRole.MEMBER.value, max_length=20)
    joined_at: datetime = Field(default_factory=utc_now)


class TeamInvitation(SQLModel, table=True):
    """Invitation to join a team, optionally bound to one layout.

    Leaves the pending state exactly once.
    """

    __tablename__ = "team_invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID = Field(foreign_key="teams.id", index=True)
    invited_user_id: UUID = Field(foreign_key="users.id", index=True)
    invited_by_user_id: UUID = Field(foreign_key="users.id")
    role: str = Field(default=TeamRole.MEMBER.value, max_length=20)
    status: str = Field(default=InvitationStatus.PENDING.value, max_length=20, index=True)
    layout_id: UUID | None = Field(default=None, foreign_key="generated_layouts.id")
    message: str | None = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now)
    responded_at: datetime | None = Field(default=None)

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING.value
