from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.app.models.enums import AccessRole


class LayoutRead(BaseModel):
    id: UUID
    title: str
    description: str
    generated_code: str
    input_method: str
    additional_context: str | None
    owner_user_id: UUID
    category_id: UUID | None
    is_public: bool
    parent_layout_id: UUID | None
    version_number: str
    changes_description: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LayoutSummary(BaseModel):
    """Listing view without the code body."""

    id: UUID
    title: str
    description: str
    owner_user_id: UUID
    category_id: UUID | None
    is_public: bool
    parent_layout_id: UUID | None
    version_number: str
    created_at: datetime

    model_config = {"from_attributes": True}


class SharedLayoutSummary(LayoutSummary):
    role: AccessRole


class GenerateRequest(BaseModel):
    description: str = Field(min_length=1, max_length=5000)
    additional_context: str | None = Field(default=None, max_length=2000)
    category_id: UUID | None = None
    is_public: bool = False
    layout_name: str | None = Field(default=None, min_length=1, max_length=200)


class GenerateFromImageRequest(BaseModel):
    image_base64: str = Field(min_length=1, description="Base64-encoded PNG or JPEG")
    additional_context: str | None = Field(default=None, max_length=2000)
    category_id: UUID | None = None
    is_public: bool = False
    layout_name: str | None = Field(default=None, min_length=1, max_length=200)


class ImproveRequest(BaseModel):
    feedback: str | None = Field(default=None, max_length=2000)
    code: str | None = Field(
        default=None, description="Code to improve instead of the stored version"
    )


class GenerationResponse(BaseModel):
    id: UUID
    html: str
    title: str
    description: str
    version_number: str
    parent_layout_id: UUID | None = None
    fallback: bool = Field(
        default=False, description="True when generation failed and a placeholder was stored"
    )


class VersionCreate(BaseModel):
    generated_code: str = Field(min_length=1)
    changes_description: str | None = Field(default=None, max_length=1000)
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category_id: UUID | None = None
    is_public: bool | None = None


class VisibilityUpdate(BaseModel):
    is_public: bool


class CodeUpdate(BaseModel):
    generated_code: str = Field(min_length=1)


class CategoryAssignment(BaseModel):
    category_id: UUID | None
