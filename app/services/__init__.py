"""Service layer - attribute schema stores, spec form engine and products."""

from app.services.attribute_schema import (
    AttributeSchemaStore,
    HttpAttributeSchemaStore,
    SqlAttributeSchemaStore,
)
from app.services.spec_form import DynamicSpecForm, OrphanPolicy

__all__ = [
    "AttributeSchemaStore",
    "DynamicSpecForm",
    "HttpAttributeSchemaStore",
    "OrphanPolicy",
    "SqlAttributeSchemaStore",
]
