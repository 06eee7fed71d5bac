"""
SQLAlchemy ORM Models Package.

- base: Base class, identifier factory, TimestampMixin
- catalog: Category, Brand
- product: Product, ColorVariant, SizeVariant
"""

from .base import Base, ObjectIdMixin, TimestampMixin, new_object_id
from .catalog import Category, Brand
from .product import Product, ColorVariant, SizeVariant

__all__ = [
    "Base",
    "ObjectIdMixin",
    "TimestampMixin",
    "new_object_id",
    "Category",
    "Brand",
    "Product",
    "ColorVariant",
    "SizeVariant",
]
