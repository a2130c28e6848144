"""Design assistant endpoints."""

from fastapi import APIRouter
from starlette.requests import Request

from src.app.api.dependencies import AssistantServiceDep, CurrentUser
from src.app.core.rate_limit import generation_limit, limiter
from src.app.schemas.assistant import (
    AnalyzeLayoutRequest,
    AssistantChatRequest,
    AssistantReply,
    CodeExplanation,
    ExplainCodeRequest,
    FrameworkRecommendation,
    FrameworkRequest,
    LayoutAnalysis,
)

router = APIRouter(prefix="/assistant", tags=["assistant"])

_UPSTREAM_FAILURE = {502: {"description": "Generation service unavailable"}}


@router.post("/chat", response_model=AssistantReply, responses=_UPSTREAM_FAILURE)
@limiter.limit(generation_limit)
async def chat(
    request: Request,
    data: AssistantChatRequest,
    _user: CurrentUser,
    service: AssistantServiceDep,
) -> AssistantReply:
    """Converse with the design assistant. The reply may carry a suggested action."""
    return await service.chat(data)


@router.post(
    "/framework-recommendation",
    response_model=FrameworkRecommendation,
    responses=_UPSTREAM_FAILURE,
)
@limiter.limit(generation_limit)
async def framework_recommendation(
    request: Request,
    data: FrameworkRequest,
    _user: CurrentUser,
    service: AssistantServiceDep,
) -> FrameworkRecommendation:
    return await service.recommend_framework(data.requirements)


@router.post("/analyze-layout", response_model=LayoutAnalysis, responses=_UPSTREAM_FAILURE)
@limiter.limit(generation_limit)
async def analyze_layout(
    request: Request,
    data: AnalyzeLayoutRequest,
    _user: CurrentUser,
    service: AssistantServiceDep,
) -> LayoutAnalysis:
    return await service.analyze_layout(data.html_code)


@router.post("/explain-code", response_model=CodeExplanation, responses=_UPSTREAM_FAILURE)
@limiter.limit(generation_limit)
async def explain_code(
    request: Request,
    data: ExplainCodeRequest,
    _user: CurrentUser,
    service: AssistantServiceDep,
) -> CodeExplanation:
    return await service.explain_code(data.html_code)
