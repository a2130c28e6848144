"""Category endpoints - the caller's own categories."""

from uuid import UUID

from fastapi import APIRouter, status

from src.app.api.dependencies import CurrentUser, OrganizationServiceDep
from src.app.schemas.organization import CategoryCreate, CategoryRead, CategoryUpdate

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryRead])
async def list_categories(
    current_user: CurrentUser, service: OrganizationServiceDep
) -> list[CategoryRead]:
    categories = await service.list_categories(current_user.id)
    return [CategoryRead.model_validate(c) for c in categories]


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Category created"},
        409: {"description": "A category with this name already exists"},
    },
)
async def create_category(
    data: CategoryCreate, current_user: CurrentUser, service: OrganizationServiceDep
) -> CategoryRead:
    category = await service.create_category(current_user.id, data)
    return CategoryRead.model_validate(category)


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(
    category_id: UUID, current_user: CurrentUser, service: OrganizationServiceDep
) -> CategoryRead:
    category = await service.get_category(current_user.id, category_id)
    return CategoryRead.model_validate(category)


@router.patch("/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    current_user: CurrentUser,
    service: OrganizationServiceDep,
) -> CategoryRead:
    category = await service.update_category(current_user.id, category_id, data)
    return CategoryRead.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID, current_user: CurrentUser, service: OrganizationServiceDep
) -> None:
    """Delete a category. Its layouts are kept and become uncategorized."""
    await service.delete_category(current_user.id, category_id)
