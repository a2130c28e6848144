"""Layout share model - grants a user or a team a permission on one layout."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index, text
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now
from src.app.models.enums import SharePermission


class SharedLayout(SQLModel, table=True):
    __tablename__ = "shared_layouts"
    __table_args__ = (
        CheckConstraint(
            "(shared_with_user_id IS NULL) <> (shared_with_team_id IS NULL)",
            name="ck_shared_layouts_single_target",
        ),
        Index(
            "uq_shared_layouts_layout_user",
            "layout_id",
            "shared_with_user_id",
            unique=True,
            postgresql_where=text("shared_with_user_id IS NOT NULL"),
        ),
        Index(
            "uq_shared_layouts_layout_team",
            "layout_id",
            "shared_with_team_id",
            unique=True,
            postgresql_where=text("shared_with_team_id IS NOT NULL"),
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    layout_id: UUID = Field(foreign_key="generated_layouts.id", index=True)
    shared_by_user_id: UUID = Field(foreign_key="users.id")
    shared_with_user_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    shared_with_team_id: UUID | None = Field(default=None, foreign_key="teams.id", index=True)
    permissions: str = Field(default=SharePermission.VIEWER.value, max_length=20)
    shared_at: datetime = Field(default_factory=utc_now)
