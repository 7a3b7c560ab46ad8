"""Category persistence for the admin dashboard."""

from __future__ import annotations

import json
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, ValidationError
from app.models.category import Category
from app.schemas.attributes import LocalizedText
from app.schemas.categories import CategoryCreate, CategoryOut, CategoryUpdate

logger = logging.getLogger(__name__)


def category_to_out(category: Category) -> CategoryOut:
    return CategoryOut(
        id=str(category.id),
        parent_id=str(category.parent_id) if category.parent_id is not None else None,
        name=LocalizedText.model_validate(json.loads(category.name)),
        sort_order=category.sort_order,
        is_active=category.is_active,
    )


def _check_name(name: LocalizedText) -> str:
    if not name.uz.strip():
        raise ValidationError("name.uz", "Uzbek name is required")
    return json.dumps(name.model_dump(), ensure_ascii=False)


async def get_category(db: AsyncSession, category_id: str | int) -> Category:
    try:
        pk = int(category_id)
    except (TypeError, ValueError):
        raise NotFoundError("category", category_id) from None
    category = await db.get(Category, pk)
    if category is None:
        raise NotFoundError("category", category_id)
    return category


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(select(Category).order_by(Category.sort_order, Category.id))
    return list(result.scalars().all())


async def _resolve_parent(
    db: AsyncSession, parent_id: str | None, category: Category | None = None
) -> int | None:
    """Parent primary key, refusing unknown parents and cycles."""
    if not parent_id:
        return None
    try:
        parent = await get_category(db, parent_id)
    except NotFoundError:
        raise ValidationError("parent_id", f"Parent category {parent_id!r} does not exist") from None
    if category is not None:
        # Walk up from the new parent; meeting the category itself means a cycle
        node: Category | None = parent
        while node is not None:
            if node.id == category.id:
                raise ValidationError("parent_id", "A category cannot be nested under itself")
            node = await db.get(Category, node.parent_id) if node.parent_id is not None else None
    return parent.id


async def create_category(db: AsyncSession, body: CategoryCreate) -> Category:
    category = Category(
        name=_check_name(body.name),
        parent_id=await _resolve_parent(db, body.parent_id),
        sort_order=body.sort_order,
        is_active=body.is_active,
    )
    db.add(category)
    await db.commit()
    await db.refresh(category)
    logger.info("Created category %s", category.id)
    return category


async def update_category(db: AsyncSession, category_id: str, body: CategoryUpdate) -> Category:
    category = await get_category(db, category_id)
    present = body.model_fields_set

    name = _check_name(body.name) if body.name is not None else category.name
    parent_id = (
        await _resolve_parent(db, body.parent_id, category)
        if "parent_id" in present
        else category.parent_id
    )

    category.name = name
    category.parent_id = parent_id
    if body.sort_order is not None:
        category.sort_order = body.sort_order
    if body.is_active is not None:
        category.is_active = body.is_active

    await db.commit()
    await db.refresh(category)
    logger.info("Updated category %s", category.id)
    return category


async def delete_category(db: AsyncSession, category_id: str) -> None:
    """Delete a leaf category together with its attribute schema.

    Products keep their stored specs; their category id simply stops
    resolving.
    """
    category = await get_category(db, category_id)
    children = (
        await db.execute(select(func.count(Category.id)).where(Category.parent_id == category.id))
    ).scalar() or 0
    if children:
        raise ValidationError("category", f"Category has {children} subcategories; move or delete them first")

    await db.delete(category)
    await db.commit()
    logger.info("Deleted category %s", category_id)
