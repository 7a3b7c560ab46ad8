"""Shared pytest fixtures for the Marketplace Admin test suite."""

import json
from collections.abc import AsyncGenerator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers every model on Base.metadata
from app.database import Base, get_db
from app.models.category import Category
from app.models.user import User
from app.schemas.attributes import AttributeDefinition, AttributeOption, InputType, LocalizedText
from main import app

# ---------------------------------------------------------------------------
# Async engine & session fixtures (in-memory SQLite)
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture()
async def async_engine():
    """Create a fresh in-memory async engine per test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session that rolls back after each test."""
    session_factory = async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTPX async client wired to the FastAPI app with test DB override."""

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience / data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
async def admin_user(db_session: AsyncSession) -> User:
    user = User(email="admin@example.com", name="Admin", role="admin")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture()
def admin_headers(admin_user: User) -> dict[str, str]:
    """Header the reverse proxy sets for an authenticated admin."""
    return {"x-admin-email": admin_user.email}


@pytest.fixture()
async def category(db_session: AsyncSession) -> Category:
    cat = Category(
        name=json.dumps({"uz": "Soatlar", "ru": "Часы", "en": "Watches"}, ensure_ascii=False),
        sort_order=1,
    )
    db_session.add(cat)
    await db_session.commit()
    return cat


@pytest.fixture()
async def other_category(db_session: AsyncSession) -> Category:
    cat = Category(name=json.dumps({"uz": "Kiyim", "ru": "", "en": "Clothing"}), sort_order=2)
    db_session.add(cat)
    await db_session.commit()
    return cat


def make_attribute(
    key: str,
    input_type: InputType = InputType.TEXT,
    *,
    options: list[str] | None = None,
    required: bool = False,
    sort_order: int = 0,
    label: dict | None = None,
) -> AttributeDefinition:
    """Build an attribute definition without touching a store."""
    return AttributeDefinition(
        id=f"attr-{key}",
        category_id="1",
        key=key,
        type=input_type,
        label=LocalizedText.model_validate(label or {"uz": key.title()}),
        options=[
            AttributeOption(value=v, label=LocalizedText(uz=v.title())) for v in options or []
        ],
        is_required=required,
        sort_order=sort_order,
    )


@pytest.fixture()
def color_schema() -> list[AttributeDefinition]:
    return [make_attribute("color", InputType.DROPDOWN, options=["red", "blue"], required=True)]
