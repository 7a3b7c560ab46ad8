"""Multilingual label resolution."""

from __future__ import annotations

from collections.abc import Mapping

from app.schemas.attributes import LocalizedText


def resolve_label(label: LocalizedText | Mapping | None, lang: str, fallback: str) -> str:
    """Return the label in ``lang``, else the Uzbek label, else ``fallback``.

    Uzbek is the one language every label is created with, so it is the
    universal fallback. ``fallback`` is the attribute key or option value.
    """
    if label is None:
        return fallback
    if isinstance(label, LocalizedText):
        label = label.model_dump()
    text = label.get(lang) or label.get("uz")
    return text if text else fallback
