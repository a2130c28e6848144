"""Base repository with common SQL operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.app.schemas.pagination import decode_cursor, encode_cursor

# (items, next_cursor, has_more)
type Page[T] = tuple[list[T], str | None, bool]


class BaseRepository[ModelType: SQLModel]:
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    belongs to the storage unit of work driven by the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        """Mark entity for deletion (applied on commit)."""
        await self.session.delete(entity)

    async def all(self, query: Any) -> list[ModelType]:
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def paginate(
        self,
        query: Any,  # SelectOfScalar or Select - SQLModel/SQLAlchemy query
        cursor: str | None,
        limit: int,
        cursor_field: Any,
    ) -> Page[ModelType]:
        """Execute cursor-based pagination on a query.

        Args:
            query: The base SQLAlchemy query to paginate
            cursor: Optional cursor from previous page (base64-encoded)
            limit: Maximum number of items to return
            cursor_field: The field to use for cursor (e.g., created_at)

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        if cursor:
            try:
                cursor_value = parse_cursor_value(decode_cursor(cursor))
                query = query.where(cursor_field < cursor_value)
            except (ValueError, TypeError):
                # Invalid cursor - ignore and start from beginning
                pass

        query = query.order_by(cursor_field.desc()).limit(limit + 1)

        items = await self.all(query)

        has_more = len(items) > limit
        if has_more:
            items = items[:limit]

        next_cursor = None
        if has_more and items:
            next_cursor = cursor_for(getattr(items[-1], cursor_field.key))

        return items, next_cursor, has_more


def parse_cursor_value(cursor_str: str) -> datetime | UUID | str:
    """Parse a decoded cursor as datetime, then UUID, else keep the string."""
    try:
        return datetime.fromisoformat(cursor_str)
    except ValueError:
        try:
            return UUID(cursor_str)
        except ValueError:
            return cursor_str


def cursor_for(value: Any) -> str | None:
    """Encode a cursor field value to its stable string form."""
    if isinstance(value, datetime):
        return encode_cursor(value.isoformat())
    if value is not None:
        return encode_cursor(str(value))
    return None
