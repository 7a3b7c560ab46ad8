"""Authentication service - proxy header parsing + user lookup."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Look up a registered user by email."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


def get_auth_email(headers) -> str | None:
    """Extract the authenticated email injected by the reverse proxy."""
    email = headers.get(settings.AUTH_HEADER)
    return email.strip().lower() if email else None
