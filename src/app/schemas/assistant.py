"""Design assistant payloads.

Assistant replies carry a closed set of actions; each variant holds only
the fields valid for its kind and is selected by the `action_type` tag.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    content: str = Field(max_length=5000)
    sender: Literal["user", "assistant"]


class AssistantChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=5000)
    current_layout: str | None = None
    conversation_history: list[ChatTurn] = Field(default_factory=list)


class GenerateAction(BaseModel):
    action_type: Literal["generate"] = "generate"
    description: str
    framework: str | None = None
    additional_context: str | None = None


class ImproveAction(BaseModel):
    action_type: Literal["improve"] = "improve"
    feedback: str


class RecommendAction(BaseModel):
    action_type: Literal["recommend"] = "recommend"
    framework: str
    reasoning: str | None = None


class NoAction(BaseModel):
    action_type: Literal["none"] = "none"


AssistantAction = Annotated[
    GenerateAction | ImproveAction | RecommendAction | NoAction,
    Field(discriminator="action_type"),
]


class AssistantReply(BaseModel):
    response: str
    suggestions: list[str] = Field(default_factory=list)
    action: AssistantAction = Field(default_factory=NoAction)


class FrameworkRequest(BaseModel):
    requirements: str = Field(min_length=1, max_length=5000)


class FrameworkAlternative(BaseModel):
    name: str
    reason: str


class FrameworkRecommendation(BaseModel):
    framework: str
    reasoning: str
    alternatives: list[FrameworkAlternative] = Field(default_factory=list)


class AnalyzeLayoutRequest(BaseModel):
    html_code: str = Field(min_length=1)


class LayoutAnalysis(BaseModel):
    improvements: list[str] = Field(default_factory=list)
    reasoning: str = ""
    priority: Literal["low", "medium", "high"] = "medium"


class ExplainCodeRequest(BaseModel):
    html_code: str = Field(min_length=1)


class CodeExplanation(BaseModel):
    explanation: str
