"""Storage unit-of-work dependency."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends

from src.app.storage import Storage, open_storage


async def get_storage() -> AsyncGenerator[Storage]:
    """One unit of work per request on the configured backend."""
    async with open_storage() as storage:
        yield storage


StorageDep = Annotated[Storage, Depends(get_storage)]
