"""Marketplace Admin - FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import settings
from app.database import init_db
from app.logging_conf import setup_logging
from app.middleware import add_error_handlers, install_request_logging
from app.routers import admin, attributes, categories, products

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    setup_logging()
    logger.info(
        "Starting %s (attribute backend: %s)", settings.APP_NAME, settings.ATTRIBUTE_BACKEND
    )
    # Create data directory if needed
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    # Initialize database tables
    await init_db()
    yield


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)

# Middleware
install_request_logging(app)
add_error_handlers(app)


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


# Routers
app.include_router(categories.router)
app.include_router(categories.admin_router)
app.include_router(attributes.router)
app.include_router(products.router)
app.include_router(admin.router)
