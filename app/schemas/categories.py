"""Wire shapes for product categories."""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.attributes import LocalizedText


class CategoryCreate(BaseModel):
    name: LocalizedText
    parent_id: str | None = None
    sort_order: int = 0
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: LocalizedText | None = None
    parent_id: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None


class CategoryOut(BaseModel):
    id: str
    parent_id: str | None = None
    name: LocalizedText
    sort_order: int = 0
    is_active: bool = True


class CategoryResponse(BaseModel):
    success: bool = True
    message: str | None = None
    category: CategoryOut


class CategoryListResponse(BaseModel):
    success: bool = True
    categories: list[CategoryOut] = Field(default_factory=list)
    count: int = 0
