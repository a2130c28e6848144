"""Repository layer - SQL data access.

Re-exports all repositories for convenience.
"""

from src.app.repositories.base import BaseRepository
from src.app.repositories.layout import CommentRepository, LayoutRepository
from src.app.repositories.organization import (
    CategoryRepository,
    LayoutTagRepository,
    TagRepository,
)
from src.app.repositories.sharing import ShareRepository
from src.app.repositories.team import (
    InvitationRepository,
    TeamMemberRepository,
    TeamRepository,
)
from src.app.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "CommentRepository",
    "InvitationRepository",
    "LayoutRepository",
    "LayoutTagRepository",
    "ShareRepository",
    "TagRepository",
    "TeamMemberRepository",
    "TeamRepository",
    "UserRepository",
]
