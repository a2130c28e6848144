"""Test helpers shared by unit and integration tests."""

from typing import Any

from src.app.core.exceptions import DependencyFailureError
from src.app.core.generation import GeneratedCode, LayoutGenerator
from src.app.services import (
    AccessResolver,
    AssistantService,
    CommentService,
    GenerationService,
    InvitationService,
    LayoutService,
    OrganizationService,
    SearchService,
    SharingService,
    TeamService,
)
from src.app.storage import Storage


class FakeGenerator(LayoutGenerator):
    """Generator that answers from canned data instead of calling OpenAI.

    Set `fail = True` to make every call raise DependencyFailureError.
    """

    def __init__(self) -> None:
        super().__init__(api_key=None)
        self.fail = False
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.title = "Landing v1"
        self.chat_result: dict[str, Any] = {
            "response": "Let's build a hero section.",
            "suggestions": ["Add a call to action"],
            "actionType": "none",
        }
        self.framework_result: dict[str, Any] = {
            "framework": "tailwind",
            "reasoning": "Utility classes suit custom designs.",
        }
        self.analysis_result: dict[str, Any] = {
            "improvements": ["Increase contrast"],
            "reasoning": "Text is hard to read.",
            "priority": "high",
        }

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.fail:
            raise DependencyFailureError("Generation service is unavailable")

    async def generate_from_description(
        self, description: str, additional_context: str | None = None
    ) -> GeneratedCode:
        self._record("generate_from_description", description, additional_context)
        return GeneratedCode(
            html=f"<main><h1>{description}</h1></main>",
            title=self.title,
            description=f"Layout for {description}",
        )

    async def generate_from_image(
        self,
        image_base64: str,
        additional_context: str | None = None,
        media_type: str = "image/jpeg",
    ) -> GeneratedCode:
        self._record("generate_from_image", media_type, additional_context)
        return GeneratedCode(html="<main>from image</main>", title=self.title, description="")

    async def improve_layout(self, html_code: str, feedback: str | None = None) -> GeneratedCode:
        self._record("improve_layout", html_code, feedback)
        return GeneratedCode(
            html=f"{html_code}<!-- improved -->",
            title="Improved Layout",
            description="Better spacing",
        )

    async def explain_code(self, html_code: str) -> str:
        self._record("explain_code", html_code)
        return "A centered heading."

    async def assistant_chat(
        self,
        message: str,
        history: list[dict[str, str]],
        has_current_layout: bool = False,
    ) -> dict[str, Any]:
        self._record("assistant_chat", message, history, has_current_layout)
        return self.chat_result

    async def recommend_framework(self, requirements: str) -> dict[str, Any]:
        self._record("recommend_framework", requirements)
        return self.framework_result

    async def analyze_layout(self, html_code: str) -> dict[str, Any]:
        self._record("analyze_layout", html_code)
        return self.analysis_result


class Services:
    """Every service over one storage unit, sharing one access resolver."""

    def __init__(self, storage: Storage, generator: LayoutGenerator):
        self.storage = storage
        self.access = AccessResolver(storage)
        self.layouts = LayoutService(storage, self.access)
        self.organization = OrganizationService(storage, self.access)
        self.teams = TeamService(storage, self.access)
        self.invitations = InvitationService(storage, self.access)
        self.sharing = SharingService(storage, self.access)
        self.comments = CommentService(storage, self.access)
        self.search = SearchService(storage, self.layouts)
        self.generation = GenerationService(self.layouts, generator)
        self.assistant = AssistantService(generator)
