from datetime import date
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from src.app.models.enums import TagMatch


class SearchScope(str, Enum):
    OWN = "own"
    ACCESSIBLE = "accessible"


class LayoutSearchParams(BaseModel):
    """Query parameters of the layout search endpoint.

    Date bounds are inclusive whole days on created_at.
    """

    q: str | None = Field(default=None, max_length=200, description="Text in title or description")
    category_id: UUID | None = None
    tag_ids: list[UUID] = Field(default_factory=list)
    tag_match: TagMatch = TagMatch.ALL
    is_public: bool | None = None
    date_from: date | None = None
    date_to: date | None = None
    scope: SearchScope = SearchScope.OWN
    limit: int = Field(default=50, ge=1, le=200)

    @model_validator(mode="after")
    def validate_date_range(self) -> "LayoutSearchParams":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self
