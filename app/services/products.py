"""Product persistence with schema-validated specs."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, SpecValidationError, UnknownFieldError, ValidationError
from app.models.product import Product
from app.schemas.attributes import AttributeDefinition, InputType, LocalizedText
from app.schemas.products import ProductCreate, ProductOut, ProductUpdate
from app.services.attribute_schema import AttributeSchemaStore
from app.services.spec_form import (
    DynamicSpecForm,
    FormField,
    OrphanPolicy,
    decode_specs,
    encode_specs,
)

logger = logging.getLogger(__name__)


def product_to_out(product: Product) -> ProductOut:
    return ProductOut(
        id=str(product.id),
        category_id=product.category_id,
        name=LocalizedText.model_validate(json.loads(product.name)),
        description=product.description or "",
        price=product.price,
        discount_price=product.discount_price,
        specs=decode_specs(product.specs),
        is_new=product.is_new,
        is_popular=product.is_popular,
        is_active=product.is_active,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def build_specs(
    schema: list[AttributeDefinition],
    stored: Mapping[str, Any] | None,
    submitted: Mapping[str, Any] | None,
    orphan_policy: OrphanPolicy = OrphanPolicy.PRESERVE,
) -> dict[str, Any]:
    """Run stored plus submitted spec values through a spec form.

    Submitted keys the schema does not define are reported alongside the
    form's own field errors in a single ``SpecValidationError``.
    """
    form = DynamicSpecForm(orphan_policy=orphan_policy)
    form.initialize(schema, stored)

    unknown: list[UnknownFieldError] = []
    for key, value in (submitted or {}).items():
        try:
            form.set_value(key, value)
        except UnknownFieldError as exc:
            unknown.append(exc)

    try:
        specs = form.validate_and_serialize()
    except SpecValidationError as exc:
        raise SpecValidationError([*unknown, *exc.errors]) from None
    if unknown:
        raise SpecValidationError(list(unknown))
    return specs


async def _schema_for(store: AttributeSchemaStore, category_id: str | None) -> list[AttributeDefinition]:
    if not category_id:
        return []
    return await store.list_for_category(category_id)


def _check_name(name: LocalizedText) -> str:
    if not name.uz.strip():
        raise ValidationError("name.uz", "Uzbek name is required")
    return json.dumps(name.model_dump(), ensure_ascii=False)


def _check_prices(price: float, discount_price: float | None) -> None:
    if discount_price is not None and discount_price >= price:
        raise ValidationError("discount_price", "Discount price must be lower than price")


async def get_product(db: AsyncSession, product_id: str) -> Product:
    try:
        pk = int(product_id)
    except (TypeError, ValueError):
        raise NotFoundError("product", product_id) from None
    product = await db.get(Product, pk)
    if product is None:
        raise NotFoundError("product", product_id)
    return product


async def list_products(db: AsyncSession, category_id: str | None = None) -> list[Product]:
    query = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
    if category_id:
        query = query.where(Product.category_id == category_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_product(
    db: AsyncSession,
    store: AttributeSchemaStore,
    body: ProductCreate,
    orphan_policy: OrphanPolicy = OrphanPolicy.PRESERVE,
) -> Product:
    name = _check_name(body.name)
    _check_prices(body.price, body.discount_price)
    schema = await _schema_for(store, body.category_id)
    specs = build_specs(schema, {}, body.specs, orphan_policy)

    product = Product(
        category_id=body.category_id,
        name=name,
        description=body.description,
        price=body.price,
        discount_price=body.discount_price,
        specs=encode_specs(specs) if specs else None,
        is_new=body.is_new,
        is_popular=body.is_popular,
        is_active=body.is_active,
    )
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info("Created product %s with %d spec values", product.id, len(specs))
    return product


async def update_product(
    db: AsyncSession,
    store: AttributeSchemaStore,
    product_id: str,
    body: ProductUpdate,
    orphan_policy: OrphanPolicy = OrphanPolicy.PRESERVE,
) -> Product:
    product = await get_product(db, product_id)
    present = body.model_fields_set

    name = _check_name(body.name) if body.name is not None else product.name
    price = body.price if body.price is not None else product.price
    discount_price = body.discount_price if "discount_price" in present else product.discount_price
    _check_prices(price, discount_price)

    category_id = body.category_id if "category_id" in present else product.category_id
    category_changed = category_id != product.category_id
    if "specs" in present or category_changed:
        # Stored values for attributes the new category lacks become orphans
        schema = await _schema_for(store, category_id)
        specs = build_specs(schema, decode_specs(product.specs), body.specs, orphan_policy)
        product.specs = encode_specs(specs) if specs else None

    product.category_id = category_id
    product.name = name
    product.price = price
    product.discount_price = discount_price
    if body.description is not None:
        product.description = body.description
    for flag in ("is_new", "is_popular", "is_active"):
        value = getattr(body, flag)
        if value is not None:
            setattr(product, flag, value)

    product.updated_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(product)
    logger.info("Updated product %s", product.id)
    return product


async def delete_product(db: AsyncSession, product_id: str) -> None:
    product = await get_product(db, product_id)
    await db.delete(product)
    await db.commit()
    logger.info("Deleted product %s", product_id)


def specs_from_form(schema: list[AttributeDefinition], form: Mapping[str, Any]) -> dict[str, Any]:
    """Spec values posted by the HTML spec form.

    Browsers leave unchecked checkboxes out of the post, so a missing
    switch means off. Other widgets always post a string, blank when unset.
    """
    submitted: dict[str, Any] = {}
    for attr in schema:
        if attr.type is InputType.SWITCH:
            submitted[attr.key] = form.get(attr.key) == "true"
        else:
            submitted[attr.key] = form.get(attr.key) or ""
    return submitted


async def spec_form_fields(
    store: AttributeSchemaStore,
    category_id: str,
    stored: Mapping[str, Any] | None,
    lang: str,
    submitted: Mapping[str, Any] | None = None,
) -> list[FormField]:
    """Field descriptors for editing specs under ``category_id``.

    Values come from ``stored``, overlaid with ``submitted`` when a post is
    being redisplayed. Orphaned values are kept on save but never rendered.
    """
    form = DynamicSpecForm()
    form.initialize(await store.list_for_category(category_id), stored)
    for key, value in (submitted or {}).items():
        form.set_value(key, value)
    return form.fields(lang)
