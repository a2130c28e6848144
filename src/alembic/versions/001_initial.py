"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _string(length: int) -> sqlmodel.sql.sqltypes.AutoString:
    return sqlmodel.sql.sqltypes.AutoString(length=length)


def upgrade() -> None:
    # 1. Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", _string(50), nullable=False),
        sa.Column("email", _string(255), nullable=False),
        sa.Column("hashed_password", _string(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # 2. Categories and tags (per-owner unique names)
    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", _string(100), nullable=False),
        sa.Column("color", _string(20), nullable=False, server_default="#6366f1"),
        sa.Column("description", _string(500), nullable=True),
        sa.Column("owner_user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("owner_user_id", "name", name="uq_categories_owner_name"),
    )
    op.create_index("ix_categories_owner_user_id", "categories", ["owner_user_id"])

    op.create_table(
        "tags",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", _string(50), nullable=False),
        sa.Column("color", _string(20), nullable=False, server_default="#10b981"),
        sa.Column("description", _string(500), nullable=True),
        sa.Column("owner_user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("owner_user_id", "name", name="uq_tags_owner_name"),
    )
    op.create_index("ix_tags_owner_user_id", "tags", ["owner_user_id"])

    # 3. Layout graph
    op.create_table(
        "generated_layouts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", _string(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("generated_code", sa.Text(), nullable=False),
        sa.Column("input_method", _string(20), nullable=False, server_default="text"),
        sa.Column("additional_context", sa.Text(), nullable=True),
        sa.Column("owner_user_id", sa.Uuid(), nullable=False),
        sa.Column("category_id", sa.Uuid(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("parent_layout_id", sa.Uuid(), nullable=True),
        sa.Column("version_number", _string(20), nullable=False, server_default="v1.0"),
        sa.Column("changes_description", _string(1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"]),
        sa.ForeignKeyConstraint(["parent_layout_id"], ["generated_layouts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_generated_layouts_owner_user_id", "generated_layouts", ["owner_user_id"])
    op.create_index("ix_generated_layouts_category_id", "generated_layouts", ["category_id"])
    op.create_index("ix_generated_layouts_is_public", "generated_layouts", ["is_public"])
    op.create_index(
        "ix_generated_layouts_parent_layout_id", "generated_layouts", ["parent_layout_id"]
    )
    op.create_index("ix_generated_layouts_created_at", "generated_layouts", ["created_at"])
    op.create_index(
        "ix_generated_layouts_owner_created",
        "generated_layouts",
        ["owner_user_id", "created_at"],
    )
    # Root titles are unique per owner; versions share their root's title
    op.create_index(
        "uq_generated_layouts_owner_root_title",
        "generated_layouts",
        ["owner_user_id", "title"],
        unique=True,
        postgresql_where=sa.text("parent_layout_id IS NULL"),
    )

    op.create_table(
        "layout_tags",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("layout_id", sa.Uuid(), nullable=False),
        sa.Column("tag_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["layout_id"], ["generated_layouts.id"]),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("layout_id", "tag_id", name="uq_layout_tags_layout_tag"),
    )
    op.create_index("ix_layout_tags_layout_id", "layout_tags", ["layout_id"])
    op.create_index("ix_layout_tags_tag_id", "layout_tags", ["tag_id"])

    op.create_table(
        "layout_comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("layout_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("position_x", sa.Float(), nullable=True),
        sa.Column("position_y", sa.Float(), nullable=True),
        sa.Column("resolved", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["layout_id"], ["generated_layouts.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_layout_comments_layout_id", "layout_comments", ["layout_id"])

    # 4. Teams
    op.create_table(
        "teams",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", _string(100), nullable=False),
        sa.Column("description", _string(500), nullable=True),
        sa.Column("created_by_user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_teams_created_by_user_id", "teams", ["created_by_user_id"])

    op.create_table(
        "team_members",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("team_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("role", _string(20), nullable=False, server_default="member"),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),
    )
    op.create_index("ix_team_members_team_id", "team_members", ["team_id"])
    op.create_index("ix_team_members_user_id", "team_members", ["user_id"])

    op.create_table(
        "team_invitations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("team_id", sa.Uuid(), nullable=False),
        sa.Column("invited_user_id", sa.Uuid(), nullable=False),
        sa.Column("invited_by_user_id", sa.Uuid(), nullable=False),
        sa.Column("role", _string(20), nullable=False, server_default="member"),
        sa.Column("status", _string(20), nullable=False, server_default="pending"),
        sa.Column("layout_id", sa.Uuid(), nullable=True),
        sa.Column("message", _string(1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("responded_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
        sa.ForeignKeyConstraint(["invited_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["invited_by_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["layout_id"], ["generated_layouts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_team_invitations_team_id", "team_invitations", ["team_id"])
    op.create_index(
        "ix_team_invitations_invited_user_id", "team_invitations", ["invited_user_id"]
    )
    op.create_index("ix_team_invitations_status", "team_invitations", ["status"])

    # 5. Shares: exactly one target, at most one share per (layout, target)
    op.create_table(
        "shared_layouts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("layout_id", sa.Uuid(), nullable=False),
        sa.Column("shared_by_user_id", sa.Uuid(), nullable=False),
        sa.Column("shared_with_user_id", sa.Uuid(), nullable=True),
        sa.Column("shared_with_team_id", sa.Uuid(), nullable=True),
        sa.Column("permissions", _string(20), nullable=False, server_default="viewer"),
        sa.Column("shared_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["layout_id"], ["generated_layouts.id"]),
        sa.ForeignKeyConstraint(["shared_by_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["shared_with_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["shared_with_team_id"], ["teams.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "(shared_with_user_id IS NULL) <> (shared_with_team_id IS NULL)",
            name="ck_shared_layouts_single_target",
        ),
    )
    op.create_index("ix_shared_layouts_layout_id", "shared_layouts", ["layout_id"])
    op.create_index(
        "ix_shared_layouts_shared_with_user_id", "shared_layouts", ["shared_with_user_id"]
    )
    op.create_index(
        "ix_shared_layouts_shared_with_team_id", "shared_layouts", ["shared_with_team_id"]
    )
    op.create_index(
        "uq_shared_layouts_layout_user",
        "shared_layouts",
        ["layout_id", "shared_with_user_id"],
        unique=True,
        postgresql_where=sa.text("shared_with_user_id IS NOT NULL"),
    )
    op.create_index(
        "uq_shared_layouts_layout_team",
        "shared_layouts",
        ["layout_id", "shared_with_team_id"],
        unique=True,
        postgresql_where=sa.text("shared_with_team_id IS NOT NULL"),
    )


def downgrade() -> None:
    op.drop_table("shared_layouts")
    op.drop_table("team_invitations")
    op.drop_table("team_members")
    op.drop_table("teams")
    op.drop_table("layout_comments")
    op.drop_table("layout_tags")
    op.drop_table("generated_layouts")
    op.drop_table("tags")
    op.drop_table("categories")
    op.drop_table("users")
