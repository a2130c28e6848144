"""Design assistant service - validates model replies into typed payloads."""

from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.app.core.generation import LayoutGenerator
from src.app.core.logging import get_logger
from src.app.schemas.assistant import (
    AssistantAction,
    AssistantChatRequest,
    AssistantReply,
    CodeExplanation,
    FrameworkRecommendation,
    LayoutAnalysis,
    NoAction,
)

logger = get_logger(__name__)

DEFAULT_REPLY = "I'm here to help you create amazing layouts! What would you like to build?"

_action_adapter: TypeAdapter[AssistantAction] = TypeAdapter(AssistantAction)

# Model JSON uses camelCase keys
_ACTION_FIELDS = {"additionalContext": "additional_context"}


def parse_action(action_type: Any, action_data: Any) -> AssistantAction:
    """Build a typed action; anything malformed degrades to NoAction."""
    if not isinstance(action_type, str) or action_type == "none":
        return NoAction()
    data = action_data if isinstance(action_data, dict) else {}
    payload = {_ACTION_FIELDS.get(key, key): value for key, value in data.items()}
    payload["action_type"] = action_type
    try:
        return _action_adapter.validate_python(payload)
    except PydanticValidationError:
        logger.info("Assistant action discarded", action_type=action_type)
        return NoAction()


class AssistantService:
    def __init__(self, generator: LayoutGenerator):
        self.generator = generator

    async def chat(self, request: AssistantChatRequest) -> AssistantReply:
        history = [
            {"role": turn.sender, "content": turn.content} for turn in request.conversation_history
        ]
        result = await self.generator.assistant_chat(
            request.message, history, has_current_layout=bool(request.current_layout)
        )
        suggestions = result.get("suggestions")
        return AssistantReply(
            response=result.get("response") or DEFAULT_REPLY,
            suggestions=[s for s in suggestions if isinstance(s, str)]
            if isinstance(suggestions, list)
            else [],
            action=parse_action(result.get("actionType"), result.get("actionData")),
        )

    async def recommend_framework(self, requirements: str) -> FrameworkRecommendation:
        result = await self.generator.recommend_framework(requirements)
        try:
            return FrameworkRecommendation.model_validate(result)
        except PydanticValidationError:
            logger.info("Framework recommendation incomplete, using default")
            return FrameworkRecommendation(
                framework=str(result.get("framework") or "tailwind"),
                reasoning=str(result.get("reasoning") or "Tailwind CSS fits most custom layouts."),
            )

    async def analyze_layout(self, html_code: str) -> LayoutAnalysis:
        result = await self.generator.analyze_layout(html_code)
        try:
            return LayoutAnalysis.model_validate(result)
        except PydanticValidationError:
            logger.info("Layout analysis malformed, returning empty analysis")
            return LayoutAnalysis()

    async def explain_code(self, html_code: str) -> CodeExplanation:
        return CodeExplanation(explanation=await self.generator.explain_code(html_code))
