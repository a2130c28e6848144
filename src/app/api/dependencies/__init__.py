"""FastAPI dependency injection definitions.

Re-exports all dependencies so routers import from one place.
"""

# Auth
from src.app.api.dependencies.auth import (
    CurrentUser,
    OptionalUser,
    get_current_user,
    get_optional_user,
)

# Services
from src.app.api.dependencies.services import (
    AccessDep,
    AssistantServiceDep,
    AuthServiceDep,
    CommentServiceDep,
    GenerationServiceDep,
    GeneratorDep,
    InvitationServiceDep,
    LayoutServiceDep,
    OrganizationServiceDep,
    SearchServiceDep,
    SharingServiceDep,
    TeamServiceDep,
    UserServiceDep,
    get_generator,
)

# Storage
from src.app.api.dependencies.storage import StorageDep, get_storage

__all__ = [
    # Storage
    "StorageDep",
    "get_storage",
    # Auth
    "CurrentUser",
    "OptionalUser",
    "get_current_user",
    "get_optional_user",
    # Services
    "AccessDep",
    "AssistantServiceDep",
    "AuthServiceDep",
    "CommentServiceDep",
    "GenerationServiceDep",
    "GeneratorDep",
    "InvitationServiceDep",
    "LayoutServiceDep",
    "OrganizationServiceDep",
    "SearchServiceDep",
    "SharingServiceDep",
    "TeamServiceDep",
    "UserServiceDep",
    "get_generator",
]
