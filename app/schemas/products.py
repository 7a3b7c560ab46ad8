"""Wire shapes for products and their spec form."""

from __future__ import annotations

from datetime import datetime
from typing import Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from app.schemas.attributes import LocalizedText

# A spec value on the wire: plain JSON scalar, null meaning "clear this field"
SpecScalar = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]


class ProductCreate(BaseModel):
    name: LocalizedText
    description: str = ""
    price: float = Field(ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    category_id: str | None = None
    is_new: bool = False
    is_popular: bool = False
    is_active: bool = True
    specs: dict[str, SpecScalar] = Field(default_factory=dict)


class ProductUpdate(BaseModel):
    name: LocalizedText | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    category_id: str | None = None
    is_new: bool | None = None
    is_popular: bool | None = None
    is_active: bool | None = None
    specs: dict[str, SpecScalar] | None = None


class ProductOut(BaseModel):
    id: str
    category_id: str | None
    name: LocalizedText
    description: str
    price: float
    discount_price: float | None
    specs: dict[str, bool | int | float | str]
    is_new: bool
    is_popular: bool
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductResponse(BaseModel):
    success: bool = True
    message: str | None = None
    product: ProductOut


class ProductListResponse(BaseModel):
    success: bool = True
    products: list[ProductOut]
    count: int
