"""Search service - conjunctive layout filters."""

from datetime import datetime, time
from uuid import UUID

from src.app.core.exceptions import ValidationError
from src.app.core.logging import get_logger
from src.app.models import GeneratedLayout
from src.app.schemas.search import LayoutSearchParams, SearchScope
from src.app.services.layout_service import LayoutService
from src.app.storage import LayoutFilter, Storage

logger = get_logger(__name__)


class SearchService:
    def __init__(self, storage: Storage, layouts: LayoutService):
        self.storage = storage
        self.layouts = layouts

    async def build_filter(self, user_id: UUID, params: LayoutSearchParams) -> LayoutFilter:
        """Translate query parameters into a storage-level filter.

        Date bounds cover whole days: date_from starts at midnight, date_to
        ends at the last microsecond of that day.
        """
        if params.date_from and params.date_to and params.date_from > params.date_to:
            raise ValidationError("date_from must not be after date_to")

        extra: frozenset[UUID] = frozenset()
        if params.scope is SearchScope.ACCESSIBLE:
            extra = frozenset(await self.layouts.shared_layout_ids(user_id))

        text_query = params.q.strip() if params.q else None
        return LayoutFilter(
            owner_user_id=user_id,
            extra_layout_ids=extra,
            category_id=params.category_id,
            tag_ids=tuple(dict.fromkeys(params.tag_ids)),
            tag_match=params.tag_match,
            text_query=text_query or None,
            is_public=params.is_public,
            created_from=datetime.combine(params.date_from, time.min) if params.date_from else None,
            created_to=datetime.combine(params.date_to, time.max) if params.date_to else None,
        )

    async def search(self, user_id: UUID, params: LayoutSearchParams) -> list[GeneratedLayout]:
        layout_filter = await self.build_filter(user_id, params)
        results = await self.storage.layouts.search(layout_filter, params.limit)
        logger.debug(
            "Layout search",
            user_id=str(user_id),
            scope=params.scope.value,
            tag_count=len(layout_filter.tag_ids),
            results=len(results),
        )
        return results
