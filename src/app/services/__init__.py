from src.app.services.access_resolver import AccessResolver
from src.app.services.assistant_service import AssistantService
from src.app.services.auth_service import AuthService
from src.app.services.comment_service import CommentService
from src.app.services.generation_service import GenerationService
from src.app.services.invitation_service import InvitationService
from src.app.services.layout_service import LayoutService
from src.app.services.organization_service import OrganizationService
from src.app.services.search_service import SearchService
from src.app.services.sharing_service import SharingService
from src.app.services.team_service import TeamService
from src.app.services.user_service import UserService

__all__ = [
    "AccessResolver",
    "AssistantService",
    "AuthService",
    "CommentService",
    "GenerationService",
    "InvitationService",
    "LayoutService",
    "OrganizationService",
    "SearchService",
    "SharingService",
    "TeamService",
    "UserService",
]
