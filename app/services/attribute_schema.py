"""Attribute schema store — CRUD over the per-category product spec schema.

Two implementations share the field rules in this module:
``SqlAttributeSchemaStore`` keeps the schema in the local database and
``HttpAttributeSchemaStore`` forwards to the marketplace API.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, UpstreamError, ValidationError
from app.models.category import Category
from app.models.category_attribute import CategoryAttribute
from app.schemas.attributes import (
    AttributeDefinition,
    AttributeDraft,
    AttributeOption,
    AttributePatch,
    InputType,
    LocalizedText,
)

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"[a-z_][a-z0-9_]*")


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------


def _check_key(key: str | None) -> str:
    if not key:
        raise ValidationError("key", "Key is required")
    if not KEY_PATTERN.fullmatch(key):
        raise ValidationError("key", "Key must be lowercase letters, digits and underscores")
    return key


def _check_type(value: str | InputType | None) -> InputType:
    try:
        return InputType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in InputType)
        raise ValidationError("type", f"Type must be one of: {allowed}") from None


def _check_label(label: LocalizedText | None) -> LocalizedText:
    if label is None or not label.uz.strip():
        raise ValidationError("label.uz", "Uzbek label is required")
    return label


def _check_options(
    input_type: InputType, options: list[AttributeOption] | None
) -> list[AttributeOption]:
    # Only dropdowns carry options; anything sent for other types is discarded
    if input_type is not InputType.DROPDOWN:
        return []
    if not options:
        raise ValidationError("options", "Dropdown attributes need at least one option")
    seen: set[str] = set()
    for i, opt in enumerate(options):
        if not opt.value.strip():
            raise ValidationError(f"options[{i}].value", "Option value is required")
        if opt.value in seen:
            raise ValidationError(f"options[{i}].value", f"Duplicate option value {opt.value!r}")
        if not opt.label.uz.strip():
            raise ValidationError(f"options[{i}].label.uz", "Option Uzbek label is required")
        seen.add(opt.value)
    return list(options)


def normalize_draft(draft: AttributeDraft) -> dict[str, Any]:
    """Validate a create draft and return the fields of the new definition."""
    input_type = _check_type(draft.type)
    return {
        "key": _check_key(draft.key),
        "type": input_type,
        "label": _check_label(draft.label),
        "options": _check_options(input_type, draft.options),
        "is_required": draft.is_required,
        "sort_order": draft.sort_order,
    }


def merge_patch(current: AttributeDefinition, patch: AttributePatch) -> dict[str, Any]:
    """Apply a partial update to ``current`` and validate the fields it touches.

    Options are re-checked against the resulting type, so changing a
    dropdown into a text field clears its options and turning a field
    into a dropdown requires options.
    """
    present = patch.model_fields_set
    key = _check_key(patch.key) if "key" in present else current.key
    input_type = _check_type(patch.type) if "type" in present else current.type
    label = _check_label(patch.label) if "label" in present else current.label
    options = patch.options if "options" in present else current.options
    if "options" in present or "type" in present:
        options = _check_options(input_type, options)
    is_required = current.is_required if patch.is_required is None else patch.is_required
    sort_order = current.sort_order if patch.sort_order is None else patch.sort_order
    return {
        "key": key,
        "type": input_type,
        "label": label,
        "options": options,
        "is_required": is_required,
        "sort_order": sort_order,
    }


def sort_definitions(definitions: list[AttributeDefinition]) -> list[AttributeDefinition]:
    """Order by sort_order; ``sorted`` is stable so ties keep their source order."""
    return sorted(definitions, key=lambda d: d.sort_order)


# ---------------------------------------------------------------------------
# Store interface
# ---------------------------------------------------------------------------


class AttributeSchemaStore(ABC):
    """CRUD access to the ordered attribute definitions of a category."""

    @abstractmethod
    async def list_for_category(self, category_id: str) -> list[AttributeDefinition]:
        """Attributes of a category ordered by sort_order."""

    @abstractmethod
    async def get(self, attribute_id: str) -> AttributeDefinition:
        """A single attribute definition."""

    @abstractmethod
    async def create(self, category_id: str, draft: AttributeDraft) -> AttributeDefinition:
        """Add an attribute to a category."""

    @abstractmethod
    async def update(self, attribute_id: str, patch: AttributePatch) -> AttributeDefinition:
        """Partially update an attribute."""

    @abstractmethod
    async def delete(self, attribute_id: str) -> None:
        """Remove an attribute. Stored product specs are left alone."""


# ---------------------------------------------------------------------------
# Local database
# ---------------------------------------------------------------------------


def _parse_pk(raw: str | int, resource: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise NotFoundError(resource, raw) from None


def row_to_definition(row: CategoryAttribute) -> AttributeDefinition:
    return AttributeDefinition(
        id=str(row.id),
        category_id=str(row.category_id),
        key=row.key,
        type=InputType(row.type),
        label=LocalizedText.model_validate(json.loads(row.label)),
        options=[AttributeOption.model_validate(o) for o in json.loads(row.options or "[]")],
        is_required=row.is_required,
        sort_order=row.sort_order,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _apply_fields(row: CategoryAttribute, fields: dict[str, Any]) -> None:
    row.key = fields["key"]
    row.type = fields["type"].value
    row.label = json.dumps(fields["label"].model_dump(), ensure_ascii=False)
    options = [opt.model_dump() for opt in fields["options"]]
    row.options = json.dumps(options, ensure_ascii=False) if options else None
    row.is_required = fields["is_required"]
    row.sort_order = fields["sort_order"]


class SqlAttributeSchemaStore(AttributeSchemaStore):
    """Attribute schema kept in this service's own database."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def _get_category(self, category_id: str) -> Category:
        category = await self._db.get(Category, _parse_pk(category_id, "category"))
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    async def _get_row(self, attribute_id: str) -> CategoryAttribute:
        row = await self._db.get(CategoryAttribute, _parse_pk(attribute_id, "attribute"))
        if row is None:
            raise NotFoundError("attribute", attribute_id)
        return row

    async def _ensure_unique_key(
        self, category_id: int, key: str, exclude_id: int | None = None
    ) -> None:
        query = select(CategoryAttribute.id).where(
            CategoryAttribute.category_id == category_id,
            CategoryAttribute.key == key,
        )
        if exclude_id is not None:
            query = query.where(CategoryAttribute.id != exclude_id)
        if (await self._db.execute(query)).first() is not None:
            raise ValidationError("key", f"Key {key!r} already exists in this category")

    async def list_for_category(self, category_id: str) -> list[AttributeDefinition]:
        category = await self._get_category(category_id)
        result = await self._db.execute(
            select(CategoryAttribute)
            .where(CategoryAttribute.category_id == category.id)
            .order_by(CategoryAttribute.sort_order, CategoryAttribute.id)
        )
        return [row_to_definition(row) for row in result.scalars().all()]

    async def get(self, attribute_id: str) -> AttributeDefinition:
        return row_to_definition(await self._get_row(attribute_id))

    async def create(self, category_id: str, draft: AttributeDraft) -> AttributeDefinition:
        category = await self._get_category(category_id)
        fields = normalize_draft(draft)
        await self._ensure_unique_key(category.id, fields["key"])

        row = CategoryAttribute(category_id=category.id)
        _apply_fields(row, fields)
        self._db.add(row)
        await self._db.commit()
        await self._db.refresh(row)
        logger.info("Created attribute %s (%s) in category %s", row.key, row.type, category.id)
        return row_to_definition(row)

    async def update(self, attribute_id: str, patch: AttributePatch) -> AttributeDefinition:
        row = await self._get_row(attribute_id)
        fields = merge_patch(row_to_definition(row), patch)
        if fields["key"] != row.key:
            await self._ensure_unique_key(row.category_id, fields["key"], exclude_id=row.id)

        _apply_fields(row, fields)
        row.updated_at = datetime.now(timezone.utc)
        await self._db.commit()
        await self._db.refresh(row)
        logger.info("Updated attribute %s (id=%s)", row.key, row.id)
        return row_to_definition(row)

    async def delete(self, attribute_id: str) -> None:
        row = await self._get_row(attribute_id)
        await self._db.delete(row)
        await self._db.commit()
        logger.info("Deleted attribute %s (id=%s)", row.key, attribute_id)


# ---------------------------------------------------------------------------
# Remote marketplace API
# ---------------------------------------------------------------------------


def _definition_payload(fields: dict[str, Any]) -> dict[str, Any]:
    payload = {
        "key": fields["key"],
        "type": fields["type"].value,
        "label": fields["label"].model_dump(),
        "is_required": fields["is_required"],
        "sort_order": fields["sort_order"],
    }
    if fields["options"]:
        payload["options"] = [opt.model_dump() for opt in fields["options"]]
    return payload


def _parse_remote_definition(raw: Any) -> AttributeDefinition:
    if not isinstance(raw, dict):
        logger.error("Marketplace API response has no attribute record: %r", raw)
        raise UpstreamError("Marketplace API returned no attribute record")
    try:
        data = dict(raw)
        data["id"] = str(data["id"])
        data["category_id"] = str(data["category_id"])
        data["options"] = data.get("options") or []
        return AttributeDefinition.model_validate(data)
    except (KeyError, PydanticValidationError) as e:
        logger.error("Malformed attribute record from marketplace API: %s", e)
        raise UpstreamError(f"Marketplace API returned a malformed attribute: {e}") from e


class HttpAttributeSchemaStore(AttributeSchemaStore):
    """Attribute schema owned by the marketplace API, reached over HTTP."""

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        resource: str,
        identifier: str,
        payload: dict | None = None,
    ) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=self._headers(),
                transport=self._transport,
            ) as client:
                resp = await client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            logger.error("Marketplace API %s %s failed: %s", method, path, e)
            raise UpstreamError(f"Marketplace API unreachable: {e}") from e

        body = self._json_body(resp)
        if resp.status_code == 404:
            raise NotFoundError(resource, identifier)
        if resp.status_code in (400, 422):
            raise ValidationError(
                body.get("field") or "request",
                body.get("message") or body.get("detail") or "Rejected by marketplace API",
            )
        if resp.is_error or body.get("success") is False:
            logger.error(
                "Marketplace API %s %s returned %s: %s", method, path, resp.status_code, body
            )
            raise UpstreamError(
                body.get("message") or f"Marketplace API returned {resp.status_code}",
                status_code=resp.status_code,
            )
        return body

    @staticmethod
    def _json_body(resp: httpx.Response) -> dict[str, Any]:
        if not resp.content:
            return {}
        try:
            body = resp.json()
        except ValueError:
            if resp.is_error:
                return {}
            raise UpstreamError(
                "Marketplace API returned a non-JSON body", status_code=resp.status_code
            ) from None
        return body if isinstance(body, dict) else {}

    async def list_for_category(self, category_id: str) -> list[AttributeDefinition]:
        body = await self._request(
            "GET", f"/categories/{category_id}/attributes", "category", category_id
        )
        definitions = [_parse_remote_definition(a) for a in body.get("attributes") or []]
        return sort_definitions(definitions)

    async def get(self, attribute_id: str) -> AttributeDefinition:
        body = await self._request(
            "GET", f"/admin/category-attributes/{attribute_id}", "attribute", attribute_id
        )
        return _parse_remote_definition(body.get("attribute"))

    async def create(self, category_id: str, draft: AttributeDraft) -> AttributeDefinition:
        fields = normalize_draft(draft)
        body = await self._request(
            "POST",
            f"/admin/categories/{category_id}/attributes",
            "category",
            category_id,
            payload=_definition_payload(fields),
        )
        logger.info("Created remote attribute %s in category %s", fields["key"], category_id)
        return _parse_remote_definition(body.get("attribute"))

    async def update(self, attribute_id: str, patch: AttributePatch) -> AttributeDefinition:
        fields = merge_patch(await self.get(attribute_id), patch)
        body = await self._request(
            "PUT",
            f"/admin/category-attributes/{attribute_id}",
            "attribute",
            attribute_id,
            payload=_definition_payload(fields),
        )
        logger.info("Updated remote attribute %s", attribute_id)
        return _parse_remote_definition(body.get("attribute"))

    async def delete(self, attribute_id: str) -> None:
        await self._request(
            "DELETE", f"/admin/category-attributes/{attribute_id}", "attribute", attribute_id
        )
        logger.info("Deleted remote attribute %s", attribute_id)
