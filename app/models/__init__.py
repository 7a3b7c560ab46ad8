"""ORM models package - exports all models and Base."""

from app.database import Base
from app.models.user import User
from app.models.category import Category
from app.models.category_attribute import CategoryAttribute
from app.models.product import Product

__all__ = [
    "Base",
    "User",
    "Category",
    "CategoryAttribute",
    "Product",
]
