"""Generation service - turns AI output into layout graph nodes.

A failed generation call never loses the request: the layout is stored with
a placeholder document and the response is flagged as a fallback.
"""

import base64
import binascii
from dataclasses import dataclass
from uuid import UUID

from src.app.core.config import get_settings
from src.app.core.exceptions import DependencyFailureError, ValidationError
from src.app.core.generation import GeneratedCode, LayoutGenerator
from src.app.core.logging import get_logger
from src.app.models import AccessRole, GeneratedLayout, InputMethod
from src.app.schemas.layout import GenerateFromImageRequest, GenerateRequest, ImproveRequest
from src.app.services.layout_service import LayoutService

logger = get_logger(__name__)

PLACEHOLDER_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <script src="https://cdn.tailwindcss.com"></script>
</head>
<body class="min-h-screen flex items-center justify-center bg-gray-50">
  <main class="text-center p-8">
    <h1 class="text-2xl font-semibold text-gray-800">{title}</h1>
    <p class="mt-2 text-gray-500">
      Generation is temporarily unavailable. Try improving this layout later.
    </p>
  </main>
</body>
</html>"""

# Leading bytes -> media type
IMAGE_SIGNATURES: dict[bytes, str] = {
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"\xff\xd8\xff": "image/jpeg",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}

MAX_TITLE_ATTEMPTS = 100


@dataclass(frozen=True)
class GenerationResult:
    layout: GeneratedLayout
    fallback: bool = False


def image_media_type(data: bytes) -> str | None:
    for signature, media_type in IMAGE_SIGNATURES.items():
        if data.startswith(signature):
            return media_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def decode_image(image_base64: str, max_bytes: int) -> tuple[str, str]:
    """Validate a base64 image. Returns (clean base64, media type).

    Accepts an optional `data:<type>;base64,` prefix.
    """
    payload = image_base64.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("image_base64 is not valid base64") from e

    if not data:
        raise ValidationError("Image is empty")
    if len(data) > max_bytes:
        raise ValidationError(f"Image exceeds the {max_bytes // (1024 * 1024)} MB limit")
    media_type = image_media_type(data)
    if media_type is None:
        raise ValidationError("Unsupported image format; use PNG, JPEG, GIF or WebP")
    return payload, media_type


def placeholder(title: str, description: str) -> GeneratedCode:
    return GeneratedCode(
        html=PLACEHOLDER_HTML.format(title=title),
        title=title,
        description=description,
    )


class GenerationService:
    def __init__(self, layouts: LayoutService, generator: LayoutGenerator):
        self.layouts = layouts
        self.generator = generator

    async def _free_title(self, owner_user_id: UUID, title: str) -> str:
        """First of `title`, `title (2)`, `title (3)`, ... the owner has not used."""
        candidate = title
        for n in range(2, MAX_TITLE_ATTEMPTS + 2):
            taken = await self.layouts.storage.layouts.get_root_by_title(owner_user_id, candidate)
            if taken is None:
                return candidate
            candidate = f"{title} ({n})"
        return candidate

    async def _store_root(
        self,
        owner_user_id: UUID,
        code: GeneratedCode,
        *,
        layout_name: str | None,
        input_method: InputMethod,
        additional_context: str | None,
        category_id: UUID | None,
        is_public: bool,
    ) -> GeneratedLayout:
        # A caller-chosen name must be unique; a generated one is made unique
        title = layout_name or await self._free_title(owner_user_id, code.title)
        return await self.layouts.create_root(
            owner_user_id=owner_user_id,
            title=title,
            description=code.description,
            generated_code=code.html,
            input_method=input_method,
            additional_context=additional_context,
            category_id=category_id,
            is_public=is_public,
        )

    async def generate_from_description(
        self, owner_user_id: UUID, request: GenerateRequest
    ) -> GenerationResult:
        if request.layout_name:
            await self.layouts.ensure_title_available(owner_user_id, request.layout_name)

        fallback = False
        try:
            code = await self.generator.generate_from_description(
                request.description, request.additional_context
            )
        except DependencyFailureError as e:
            logger.warning("Generation failed, storing placeholder", error=e.detail)
            fallback = True
            code = placeholder(request.layout_name or "Untitled Layout", request.description)

        layout = await self._store_root(
            owner_user_id,
            code,
            layout_name=request.layout_name,
            input_method=InputMethod.TEXT,
            additional_context=request.additional_context,
            category_id=request.category_id,
            is_public=request.is_public,
        )
        return GenerationResult(layout, fallback)

    async def generate_from_image(
        self, owner_user_id: UUID, request: GenerateFromImageRequest
    ) -> GenerationResult:
        image, media_type = decode_image(request.image_base64, get_settings().max_image_bytes)
        if request.layout_name:
            await self.layouts.ensure_title_available(owner_user_id, request.layout_name)

        fallback = False
        try:
            code = await self.generator.generate_from_image(
                image, request.additional_context, media_type=media_type
            )
        except DependencyFailureError as e:
            logger.warning("Image generation failed, storing placeholder", error=e.detail)
            fallback = True
            code = placeholder(
                request.layout_name or "Untitled Layout", "Layout generated from an uploaded image"
            )

        layout = await self._store_root(
            owner_user_id,
            code,
            layout_name=request.layout_name,
            input_method=InputMethod.IMAGE,
            additional_context=request.additional_context,
            category_id=request.category_id,
            is_public=request.is_public,
        )
        return GenerationResult(layout, fallback)

    async def improve(
        self, user_id: UUID, layout_id: UUID, request: ImproveRequest
    ) -> GenerationResult:
        """Ask the model to improve a layout and store the answer as a new version.

        When the model is unavailable the version keeps the source code
        unchanged and the result is flagged as a fallback.
        """
        source, _ = await self.layouts.access.get_layout(user_id, layout_id, AccessRole.EDITOR)
        html_code = request.code or source.generated_code

        fallback = False
        try:
            code = await self.generator.improve_layout(html_code, request.feedback)
            changes = code.description
        except DependencyFailureError as e:
            logger.warning("Improvement failed, storing unchanged version", error=e.detail)
            fallback = True
            code = GeneratedCode(html=html_code, title=source.title, description=source.description)
            changes = "Improvement unavailable; code kept unchanged"

        version = await self.layouts.create_version(
            parent_layout_id=source.id,
            actor_user_id=user_id,
            generated_code=code.html,
            changes_description=request.feedback or changes,
            input_method=InputMethod.IMPROVEMENT,
        )
        return GenerationResult(version, fallback)
