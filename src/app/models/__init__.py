"""Model exports.

Import from here: `from src.app.models import User, GeneratedLayout`
"""

from src.app.models.enums import (
    AccessRole,
    InputMethod,
    InvitationStatus,
    SharePermission,
    TagMatch,
    TeamRole,
)
from src.app.models.layout import ROOT_VERSION_LABEL, GeneratedLayout, LayoutComment
from src.app.models.organization import Category, LayoutTag, Tag
from src.app.models.sharing import SharedLayout
from src.app.models.team import Team, TeamInvitation, TeamMember
from src.app.models.user import User

__all__ = [
    # Enums
    "AccessRole",
    "InputMethod",
    "InvitationStatus",
    "SharePermission",
    "TagMatch",
    "TeamRole",
    # Identity
    "User",
    # Organization
    "Category",
    "LayoutTag",
    "Tag",
    # Layout graph
    "ROOT_VERSION_LABEL",
    "GeneratedLayout",
    "LayoutComment",
    # Teams and sharing
    "SharedLayout",
    "Team",
    "TeamInvitation",
    "TeamMember",
]
