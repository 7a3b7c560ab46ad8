"""Admin routes for managing category attribute definitions."""

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_attribute_store, require_admin
from app.models.user import User
from app.schemas.attributes import (
    INPUT_TYPE_LABELS,
    AttributeDraft,
    AttributePatch,
    AttributeResponse,
)
from app.services.attribute_schema import AttributeSchemaStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["attributes"])


@router.get("/attribute-types")
async def list_attribute_types(user: User = Depends(require_admin)):
    """Input types an attribute can have, with display names."""
    return {
        "success": True,
        "types": [{"value": t.value, "label": label} for t, label in INPUT_TYPE_LABELS.items()],
    }


@router.post(
    "/categories/{category_id}/attributes",
    response_model=AttributeResponse,
    status_code=201,
)
async def create_attribute(
    category_id: str,
    body: AttributeDraft,
    user: User = Depends(require_admin),
    store: AttributeSchemaStore = Depends(get_attribute_store),
):
    attribute = await store.create(category_id, body)
    logger.info("%s added attribute %s to category %s", user.email, attribute.key, category_id)
    return AttributeResponse(message="Attribute created", attribute=attribute)


@router.get("/category-attributes/{attribute_id}", response_model=AttributeResponse)
async def get_attribute(
    attribute_id: str,
    user: User = Depends(require_admin),
    store: AttributeSchemaStore = Depends(get_attribute_store),
):
    return AttributeResponse(attribute=await store.get(attribute_id))


@router.put("/category-attributes/{attribute_id}", response_model=AttributeResponse)
async def update_attribute(
    attribute_id: str,
    body: AttributePatch,
    user: User = Depends(require_admin),
    store: AttributeSchemaStore = Depends(get_attribute_store),
):
    attribute = await store.update(attribute_id, body)
    return AttributeResponse(message="Attribute updated", attribute=attribute)


@router.delete("/category-attributes/{attribute_id}")
async def delete_attribute(
    attribute_id: str,
    user: User = Depends(require_admin),
    store: AttributeSchemaStore = Depends(get_attribute_store),
):
    """Delete an attribute. Products keep any values stored under its key."""
    await store.delete(attribute_id)
    logger.info("%s deleted attribute %s", user.email, attribute_id)
    return {"success": True, "message": "Attribute deleted"}
