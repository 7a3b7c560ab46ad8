"""Seed the database with initial data (categories and an admin account).

Usage: python scripts/seed_data.py [admin-email]
"""

import asyncio
import json
import sys
from pathlib import Path

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

from app.config import settings
from app.database import init_db, async_session
from app.models.category import Category
from app.models.user import User


SEED_CATEGORIES = [
    {"name": {"uz": "Elektronika", "ru": "Электроника", "en": "Electronics"}, "sort_order": 1},
    {"name": {"uz": "Kiyim", "ru": "Одежда", "en": "Clothing"}, "sort_order": 2},
    {"name": {"uz": "Soatlar", "ru": "Часы", "en": "Watches"}, "sort_order": 3},
    {"name": {"uz": "Uy-ro'zg'or", "ru": "Дом", "en": "Home"}, "sort_order": 4},
]


async def seed(admin_email: str) -> None:
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    await init_db()
    print("Database tables created/verified.")

    async with async_session() as session:
        created = 0
        result = await session.execute(select(Category))
        existing_names = {json.loads(c.name)["en"] for c in result.scalars().all()}
        for cat_data in SEED_CATEGORIES:
            if cat_data["name"]["en"] in existing_names:
                continue
            session.add(
                Category(
                    name=json.dumps(cat_data["name"], ensure_ascii=False),
                    sort_order=cat_data["sort_order"],
                )
            )
            created += 1

        admin = (
            await session.execute(select(User).where(User.email == admin_email))
        ).scalar_one_or_none()
        if admin is None:
            session.add(User(email=admin_email, name="Administrator", role="admin"))
            print(f"Admin account created: {admin_email}")
        elif admin.role != "admin":
            admin.role = "admin"
            print(f"Promoted {admin_email} to admin")

        await session.commit()

    print(f"Seed complete: {created} categories created.")


if __name__ == "__main__":
    asyncio.run(seed(sys.argv[1] if len(sys.argv) > 1 else "admin@example.com"))
