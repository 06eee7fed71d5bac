"""
Catalog reference models: Category, Brand.

Products only store a reference to these; they are looked up by name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, ObjectIdMixin, TimestampMixin

if TYPE_CHECKING:
    from .product import Product


class Category(ObjectIdMixin, TimestampMixin, Base):
    """Product category, e.g. "Sneakers"."""

    __tablename__ = "category"

    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)

    products: Mapped[list["Product"]] = relationship(back_populates="category")


class Brand(ObjectIdMixin, TimestampMixin, Base):
    """Product brand, e.g. "Adidas"."""

    __tablename__ = "brand"

    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)

    products: Mapped[list["Product"]] = relationship(back_populates="brand")
