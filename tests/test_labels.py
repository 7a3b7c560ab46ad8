"""Label fallback: requested language, then Uzbek, then the key."""

from app.schemas.attributes import LocalizedText
from app.services.labels import resolve_label


def test_requested_language_wins():
    label = LocalizedText(uz="Rang", ru="Цвет", en="Color")
    assert resolve_label(label, "ru", "color") == "Цвет"
    assert resolve_label(label, "en", "color") == "Color"


def test_empty_language_falls_back_to_uzbek():
    label = LocalizedText(uz="Rang", ru="", en="")
    assert resolve_label(label, "en", "color") == "Rang"


def test_unknown_language_falls_back_to_uzbek():
    assert resolve_label(LocalizedText(uz="Rang"), "de", "color") == "Rang"


def test_missing_label_falls_back_to_key():
    assert resolve_label(LocalizedText(), "ru", "color") == "color"
    assert resolve_label(None, "uz", "color") == "color"


def test_plain_mapping_is_accepted():
    assert resolve_label({"uz": "Kiyim", "en": "Clothing"}, "en", "x") == "Clothing"
    assert resolve_label({"ru": "Одежда"}, "en", "x") == "x"
