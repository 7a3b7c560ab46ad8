"""FastAPI dependencies for route handlers."""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.services.attribute_schema import (
    AttributeSchemaStore,
    HttpAttributeSchemaStore,
    SqlAttributeSchemaStore,
)
from app.services.auth import get_auth_email, get_user_by_email
from app.services.spec_form import OrphanPolicy


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """Require an authenticated and registered user."""
    email = get_auth_email(request.headers)
    if not email:
        raise HTTPException(status_code=401, detail="Not authenticated")
    user = await get_user_by_email(db, email)
    if user is None:
        raise HTTPException(status_code=403, detail="Not registered")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require admin role."""
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def get_attribute_store(db: AsyncSession = Depends(get_db)) -> AttributeSchemaStore:
    """Attribute schema backend selected by ATTRIBUTE_BACKEND."""
    if settings.ATTRIBUTE_BACKEND == "remote":
        return HttpAttributeSchemaStore(
            settings.MARKETPLACE_API_URL,
            token=settings.MARKETPLACE_API_TOKEN,
            timeout=settings.UPSTREAM_TIMEOUT,
        )
    return SqlAttributeSchemaStore(db)


def get_orphan_policy() -> OrphanPolicy:
    return OrphanPolicy(settings.ORPHAN_SPEC_POLICY)
