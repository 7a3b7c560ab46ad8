"""Admin dashboard routes — HTML pages and overview API."""

import json

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.dependencies import get_attribute_store, get_orphan_policy, require_admin
from app.errors import SpecValidationError
from app.models.category import Category
from app.models.category_attribute import CategoryAttribute
from app.models.product import Product
from app.models.user import User
from app.schemas.products import ProductUpdate
from app.services.attribute_schema import AttributeSchemaStore
from app.services.products import (
    get_product,
    spec_form_fields,
    specs_from_form,
    update_product,
)
from app.services.spec_form import OrphanPolicy, decode_specs
from app.templating import templates

router = APIRouter(tags=["admin"])

LANG_PATTERN = "^(uz|ru|en)$"


# ─── HTML Pages ───────────────────────────────────────────────────────


async def _render_spec_form(
    request: Request,
    store: AttributeSchemaStore,
    product: Product,
    lang: str,
    submitted: dict | None = None,
    errors: dict[str, str] | None = None,
    saved: bool = False,
    status_code: int = 200,
):
    fields = []
    if product.category_id:
        fields = await spec_form_fields(
            store, product.category_id, decode_specs(product.specs), lang, submitted
        )
    return templates.TemplateResponse(
        request,
        "admin/spec_form.html",
        {
            "product": product,
            "product_name": json.loads(product.name),
            "fields": fields,
            "errors": errors or {},
            "saved": saved,
            "lang": lang,
        },
        status_code=status_code,
    )


@router.get("/admin/products/{product_id}/specs", response_class=HTMLResponse)
async def admin_product_specs(
    request: Request,
    product_id: str,
    lang: str = Query(default=settings.DEFAULT_LANGUAGE, pattern=LANG_PATTERN),
    saved: bool = False,
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    store: AttributeSchemaStore = Depends(get_attribute_store),
):
    """Specification form of a single product."""
    product = await get_product(db, product_id)
    return await _render_spec_form(request, store, product, lang, saved=saved)


@router.post("/admin/products/{product_id}/specs", response_class=HTMLResponse)
async def admin_product_specs_submit(
    request: Request,
    product_id: str,
    lang: str = Query(default=settings.DEFAULT_LANGUAGE, pattern=LANG_PATTERN),
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    store: AttributeSchemaStore = Depends(get_attribute_store),
    orphan_policy: OrphanPolicy = Depends(get_orphan_policy),
):
    """Save the posted spec form, or redisplay it with every field error."""
    product = await get_product(db, product_id)
    schema = await store.list_for_category(product.category_id) if product.category_id else []
    submitted = specs_from_form(schema, await request.form())

    try:
        await update_product(db, store, product_id, ProductUpdate(specs=submitted), orphan_policy)
    except SpecValidationError as exc:
        errors = {e.key: e.message for e in exc.errors}
        return await _render_spec_form(
            request, store, product, lang, submitted, errors=errors, status_code=422
        )

    return RedirectResponse(
        f"/admin/products/{product_id}/specs?lang={lang}&saved=true", status_code=303
    )


# ─── API Endpoints ────────────────────────────────────────────────────


@router.get("/api/admin/dashboard")
async def api_admin_dashboard(
    user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Return JSON statistics for admin dashboard."""
    total_categories = (
        await db.execute(select(func.count(Category.id)))
    ).scalar() or 0
    total_attributes = (
        await db.execute(select(func.count(CategoryAttribute.id)))
    ).scalar() or 0
    total_products = (
        await db.execute(select(func.count(Product.id)))
    ).scalar() or 0
    products_with_specs = (
        await db.execute(
            select(func.count(Product.id)).where(Product.specs.is_not(None))
        )
    ).scalar() or 0

    return {
        "total_categories": total_categories,
        "total_attributes": total_attributes,
        "total_products": total_products,
        "products_with_specs": products_with_specs,
    }
