"""Category routes — public reads and admin management."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_attribute_store, require_admin
from app.models.user import User
from app.schemas.attributes import AttributeListResponse
from app.schemas.categories import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from app.services.attribute_schema import AttributeSchemaStore
from app.services.categories import (
    category_to_out,
    create_category,
    delete_category,
    get_category,
    list_categories,
    update_category,
)

router = APIRouter(prefix="/api/categories", tags=["categories"])
admin_router = APIRouter(prefix="/api/admin/categories", tags=["categories"])


@router.get("", response_model=CategoryListResponse)
async def api_list_categories(db: AsyncSession = Depends(get_db)):
    """Flat category list ordered for display."""
    categories = [category_to_out(c) for c in await list_categories(db)]
    return CategoryListResponse(categories=categories, count=len(categories))


@router.get("/{category_id}", response_model=CategoryResponse)
async def api_get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return CategoryResponse(category=category_to_out(await get_category(db, category_id)))


@router.get("/{category_id}/attributes", response_model=AttributeListResponse)
async def api_list_category_attributes(
    category_id: str,
    store: AttributeSchemaStore = Depends(get_attribute_store),
):
    """Attribute schema of a category, in display order."""
    attributes = await store.list_for_category(category_id)
    return AttributeListResponse(attributes=attributes, count=len(attributes))


# ─── Admin ────────────────────────────────────────────────────────────


@admin_router.post("", response_model=CategoryResponse, status_code=201)
async def api_create_category(
    body: CategoryCreate,
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await create_category(db, body)
    return CategoryResponse(message="Category created successfully", category=category_to_out(category))


@admin_router.put("/{category_id}", response_model=CategoryResponse)
async def api_update_category(
    category_id: str,
    body: CategoryUpdate,
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await update_category(db, category_id, body)
    return CategoryResponse(message="Category updated successfully", category=category_to_out(category))


@admin_router.delete("/{category_id}")
async def api_delete_category(
    category_id: str,
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a category and its attribute schema. Product specs are untouched."""
    await delete_category(db, category_id)
    return {"success": True, "message": "Category deleted successfully"}
