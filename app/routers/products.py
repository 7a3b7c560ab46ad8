"""Admin product routes — specs are validated against the category schema."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.dependencies import get_attribute_store, get_orphan_policy, require_admin
from app.models.user import User
from app.schemas.products import (
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from app.services.attribute_schema import AttributeSchemaStore
from app.services.products import (
    create_product,
    delete_product,
    get_product,
    list_products,
    product_to_out,
    spec_form_fields,
    update_product,
)
from app.services.spec_form import OrphanPolicy, decode_specs

router = APIRouter(prefix="/api/admin/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
async def api_list_products(
    category_id: str | None = None,
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    products = [product_to_out(p) for p in await list_products(db, category_id)]
    return ProductListResponse(products=products, count=len(products))


@router.get("/spec-form")
async def api_spec_form(
    category_id: str,
    product_id: str | None = None,
    lang: str = Query(default=settings.DEFAULT_LANGUAGE, pattern="^(uz|ru|en)$"),
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    store: AttributeSchemaStore = Depends(get_attribute_store),
):
    """Form fields for editing specs under a category, pre-filled from a product."""
    stored = {}
    if product_id:
        stored = decode_specs((await get_product(db, product_id)).specs)
    fields = await spec_form_fields(store, category_id, stored, lang)
    return {
        "success": True,
        "category_id": category_id,
        "fields": [f.to_dict() for f in fields],
    }


@router.get("/{product_id}", response_model=ProductResponse)
async def api_get_product(
    product_id: str,
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return ProductResponse(product=product_to_out(await get_product(db, product_id)))


@router.post("", response_model=ProductResponse, status_code=201)
async def api_create_product(
    body: ProductCreate,
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    store: AttributeSchemaStore = Depends(get_attribute_store),
    orphan_policy: OrphanPolicy = Depends(get_orphan_policy),
):
    product = await create_product(db, store, body, orphan_policy)
    return ProductResponse(message="Product created successfully", product=product_to_out(product))


@router.put("/{product_id}", response_model=ProductResponse)
async def api_update_product(
    product_id: str,
    body: ProductUpdate,
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    store: AttributeSchemaStore = Depends(get_attribute_store),
    orphan_policy: OrphanPolicy = Depends(get_orphan_policy),
):
    product = await update_product(db, store, product_id, body, orphan_policy)
    return ProductResponse(message="Product updated successfully", product=product_to_out(product))


@router.delete("/{product_id}")
async def api_delete_product(
    product_id: str,
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await delete_product(db, product_id)
    return {"success": True, "message": "Product deleted successfully"}
