from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.app.api.middlewares import setup_middlewares
from src.app.api.v1.router import api_router
from src.app.core.config import get_settings
from src.app.core.db import dispose_engine
from src.app.core.exceptions import setup_exception_handlers
from src.app.core.health import setup_health_endpoint, setup_metrics
from src.app.core.logging import get_logger, setup_logging
from src.app.core.rate_limit import limiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", storage_backend=settings.storage_backend)
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY not set; generation will return placeholder layouts")

    yield

    logger.info("Closing connections...")
    if settings.storage_backend == "sql":
        await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login and the current user"},
    {"name": "layouts", "description": "Layout generation, version chains and search"},
    {"name": "comments", "description": "Review comments on a layout version"},
    {"name": "sharing", "description": "Direct and team shares of a layout"},
    {"name": "categories", "description": "The caller's layout categories"},
    {"name": "tags", "description": "The caller's tags"},
    {"name": "teams", "description": "Teams, members and team invitations"},
    {"name": "invitations", "description": "Invitations received by the caller"},
    {"name": "assistant", "description": "Design assistant conversations and analysis"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Versioned layout generation with teams, sharing and search",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    setup_middlewares(app, settings)

    app.include_router(api_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
