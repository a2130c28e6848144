"""Organization models - per-user categories and tags."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now


class Category(SQLModel, table=True):
    """A folder-like grouping; a layout belongs to at most one category."""

    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("owner_user_id", "name", name="uq_categories_owner_name"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    color: str = Field(default="#6366f1", max_length=20)
    description: str | None = Field(default=None, max_length=500)
    owner_user_id: UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)


class Tag(SQLModel, table=True):
    """A label attachable to any number of layouts."""

    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("owner_user_id", "name", name="uq_tags_owner_name"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=50)
    color: str = Field(default="#10b981", max_length=20)
    description: str | None = Field(default=None, max_length=500)
    owner_user_id: UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)


class LayoutTag(SQLModel, table=True):
    """Join row between a layout and a tag."""

    __tablename__ = "layout_tags"
    __table_args__ = (UniqueConstraint("layout_id", "tag_id", name="uq_layout_tags_layout_tag"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    layout_id: UUID = Field(foreign_key="generated_layouts.id", index=True)
    tag_id: UUID = Field(foreign_key="tags.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
