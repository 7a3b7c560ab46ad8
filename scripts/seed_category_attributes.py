"""Seed category attribute schemas through the attribute store.

Runs after scripts/seed_data.py. Existing keys are left untouched.
Usage: python scripts/seed_category_attributes.py
"""

import asyncio
import json
import sys
from pathlib import Path

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

from app.database import init_db, async_session
from app.errors import ValidationError
from app.models.category import Category
from app.schemas.attributes import AttributeDraft
from app.services.attribute_schema import SqlAttributeSchemaStore


def _opt(value: str, uz: str, ru: str = "", en: str = "") -> dict:
    return {"value": value, "label": {"uz": uz, "ru": ru, "en": en}}


# Keyed by the category's English name
ATTRIBUTE_DEFS: dict[str, list[dict]] = {
    "Watches": [
        {
            "key": "mechanism",
            "type": "dropdown",
            "label": {"uz": "Mexanizm", "ru": "Механизм", "en": "Mechanism"},
            "options": [
                _opt("quartz", "Kvars", "Кварцевый", "Quartz"),
                _opt("automatic", "Avtomatik", "Автоматический", "Automatic"),
                _opt("mechanical", "Mexanik", "Механический", "Mechanical"),
            ],
            "is_required": True,
            "sort_order": 1,
        },
        {
            "key": "water_resistance",
            "type": "number",
            "label": {"uz": "Suvga chidamlilik (m)", "ru": "Водозащита (м)", "en": "Water resistance (m)"},
            "sort_order": 2,
        },
        {
            "key": "has_warranty",
            "type": "switch",
            "label": {"uz": "Kafolat", "ru": "Гарантия", "en": "Warranty"},
            "sort_order": 3,
        },
    ],
    "Clothing": [
        {
            "key": "size",
            "type": "dropdown",
            "label": {"uz": "O'lcham", "ru": "Размер", "en": "Size"},
            "options": [_opt(s, s) for s in ("xs", "s", "m", "l", "xl")],
            "is_required": True,
            "sort_order": 1,
        },
        {
            "key": "material",
            "type": "text",
            "label": {"uz": "Material", "ru": "Материал", "en": "Material"},
            "sort_order": 2,
        },
    ],
    "Electronics": [
        {
            "key": "brand",
            "type": "text",
            "label": {"uz": "Brend", "ru": "Бренд", "en": "Brand"},
            "is_required": True,
            "sort_order": 1,
        },
        {
            "key": "weight",
            "type": "number",
            "label": {"uz": "Og'irligi (kg)", "ru": "Вес (кг)", "en": "Weight (kg)"},
            "sort_order": 2,
        },
    ],
}


async def seed() -> None:
    await init_db()

    async with async_session() as session:
        store = SqlAttributeSchemaStore(session)
        result = await session.execute(select(Category))
        categories = {json.loads(c.name).get("en"): c for c in result.scalars().all()}

        created = 0
        skipped = 0
        for category_name, defs in ATTRIBUTE_DEFS.items():
            category = categories.get(category_name)
            if category is None:
                print(f"Category {category_name!r} not found; run seed_data.py first.")
                continue
            for attr in defs:
                try:
                    await store.create(str(category.id), AttributeDraft.model_validate(attr))
                    created += 1
                except ValidationError as e:
                    if e.field != "key":
                        raise
                    skipped += 1

    print(f"Seed complete: {created} created, {skipped} already present.")


if __name__ == "__main__":
    asyncio.run(seed())
