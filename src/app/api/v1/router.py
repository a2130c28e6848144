from fastapi import APIRouter

from src.app.api.v1 import (
    assistant,
    auth,
    categories,
    comments,
    invitations,
    layout_tags,
    layouts,
    shares,
    tags,
    teams,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(layouts.router)
api_router.include_router(layout_tags.router)
api_router.include_router(comments.router)
api_router.include_router(shares.router)
api_router.include_router(categories.router)
api_router.include_router(tags.router)
api_router.include_router(teams.router)
api_router.include_router(invitations.router)
api_router.include_router(assistant.router)
