"""Layout graph models - generated layouts forming version chains, and comments."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, Index, Text, text
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now
from src.app.models.enums import InputMethod

ROOT_VERSION_LABEL = "v1.0"


class GeneratedLayout(SQLModel, table=True):
    """A node in a version chain.

    Roots have parent_layout_id = NULL. version_number is a display label
    only; created_at is the authoritative order.
    """

    __tablename__ = "generated_layouts"
    __table_args__ = (
        # One root title per owner. Versions reuse the root title freely.
        Index(
            "uq_generated_layouts_owner_root_title",
            "owner_user_id",
            "title",
            unique=True,
            postgresql_where=text("parent_layout_id IS NULL"),
        ),
        Index("ix_generated_layouts_owner_created", "owner_user_id", "created_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200)
    description: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    generated_code: str = Field(sa_column=Column(Text, nullable=False))
    input_method: str = Field(default=InputMethod.TEXT.value, max_length=20)
    additional_context: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    owner_user_id: UUID = Field(foreign_key="users.id", index=True)
    category_id: UUID | None = Field(default=None, foreign_key="categories.id", index=True)
    is_public: bool = Field(default=False, index=True)
    parent_layout_id: UUID | None = Field(
        default=None, foreign_key="generated_layouts.id", index=True
    )
    version_number: str = Field(default=ROOT_VERSION_LABEL, max_length=20)
    changes_description: str | None = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_root(self) -> bool:
        return self.parent_layout_id is None


class LayoutComment(SQLModel, table=True):
    """Review comment pinned to a layout, optionally at a preview position."""

    __tablename__ = "layout_comments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    layout_id: UUID = Field(foreign_key="generated_layouts.id", index=True)
    user_id: UUID = Field(foreign_key="users.id")
    comment: str = Field(sa_column=Column(Text, nullable=False))
    position_x: float | None = Field(default=None)
    position_y: float | None = Field(default=None)
    resolved: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
