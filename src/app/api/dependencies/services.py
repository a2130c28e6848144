"""Service factory dependencies.

FastAPI caches dependencies per request, so every service in one request
shares the same storage unit of work and the same AccessResolver.
"""

from typing import Annotated

from fastapi import Depends

from src.app.api.dependencies.storage import StorageDep
from src.app.core.generation import LayoutGenerator, get_layout_generator
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


def get_generator() -> LayoutGenerator:
    """Get the generation client (overridden in tests)."""
    return get_layout_generator()


GeneratorDep = Annotated[LayoutGenerator, Depends(get_generator)]


def get_access_resolver(storage: StorageDep) -> AccessResolver:
    return AccessResolver(storage)


AccessDep = Annotated[AccessResolver, Depends(get_access_resolver)]


def get_user_service(storage: StorageDep) -> UserService:
    return UserService(storage)


def get_auth_service(storage: StorageDep) -> AuthService:
    return AuthService(storage)


def get_layout_service(storage: StorageDep, access: AccessDep) -> LayoutService:
    return LayoutService(storage, access)


LayoutServiceDep = Annotated[LayoutService, Depends(get_layout_service)]


def get_generation_service(
    layouts: LayoutServiceDep, generator: GeneratorDep
) -> GenerationService:
    return GenerationService(layouts, generator)


def get_organization_service(storage: StorageDep, access: AccessDep) -> OrganizationService:
    return OrganizationService(storage, access)


def get_team_service(storage: StorageDep, access: AccessDep) -> TeamService:
    return TeamService(storage, access)


def get_invitation_service(storage: StorageDep, access: AccessDep) -> InvitationService:
    return InvitationService(storage, access)


def get_sharing_service(storage: StorageDep, access: AccessDep) -> SharingService:
    return SharingService(storage, access)


def get_comment_service(storage: StorageDep, access: AccessDep) -> CommentService:
    return CommentService(storage, access)


def get_search_service(storage: StorageDep, layouts: LayoutServiceDep) -> SearchService:
    return SearchService(storage, layouts)


def get_assistant_service(generator: GeneratorDep) -> AssistantService:
    return AssistantService(generator)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
GenerationServiceDep = Annotated[GenerationService, Depends(get_generation_service)]
OrganizationServiceDep = Annotated[OrganizationService, Depends(get_organization_service)]
TeamServiceDep = Annotated[TeamService, Depends(get_team_service)]
InvitationServiceDep = Annotated[InvitationService, Depends(get_invitation_service)]
SharingServiceDep = Annotated[SharingService, Depends(get_sharing_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
AssistantServiceDep = Annotated[AssistantService, Depends(get_assistant_service)]
