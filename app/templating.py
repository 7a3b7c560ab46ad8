"""Shared Jinja2 template environment."""

from fastapi.templating import Jinja2Templates

from app.config import settings
from app.services.labels import resolve_label

templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))
templates.env.globals["resolve_label"] = resolve_label
