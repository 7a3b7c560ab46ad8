"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # App
    APP_NAME: str = os.getenv("APP_NAME", "Marketplace Admin")
    APP_DEBUG: bool = _env_bool("APP_DEBUG")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Paths
    DATA_DIR: Path = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))
    TEMPLATES_DIR: Path = BASE_DIR / "app" / "templates"

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL", f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'marketplace.db'}"
    )

    # Auth: the reverse proxy injects the authenticated admin's email here
    AUTH_HEADER: str = os.getenv("AUTH_HEADER", "x-admin-email")

    # Attribute schema backend: "database" or "remote"
    ATTRIBUTE_BACKEND: str = os.getenv("ATTRIBUTE_BACKEND", "database")
    MARKETPLACE_API_URL: str = os.getenv("MARKETPLACE_API_URL", "http://localhost:8080/api/v1")
    MARKETPLACE_API_TOKEN: str = os.getenv("MARKETPLACE_API_TOKEN", "")
    UPSTREAM_TIMEOUT: float = float(os.getenv("UPSTREAM_TIMEOUT", "15"))

    # Product specs: "preserve" keeps values whose attribute was deleted, "drop" discards them
    ORPHAN_SPEC_POLICY: str = os.getenv("ORPHAN_SPEC_POLICY", "preserve")
    DEFAULT_LANGUAGE: str = os.getenv("DEFAULT_LANGUAGE", "uz")


settings = Settings()
