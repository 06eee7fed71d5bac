"""
Product models: Product, ColorVariant, SizeVariant.

Colors and sizes are owned by their parent: they are ordered by a position
column, cascade on delete and carry their own 24 character hex identifier so
updates can target them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_shared.config.constants import Identifiers
from .base import Base, ObjectIdMixin, TimestampMixin

if TYPE_CHECKING:
    from .catalog import Category, Brand


class Product(ObjectIdMixin, TimestampMixin, Base):
    """
    Sellable product.

    ``version`` is maintained by SQLAlchemy: every UPDATE checks the value that
    was loaded and bumps it, so a concurrent save raises StaleDataError
    instead of silently overwriting.
    """

    __tablename__ = "product"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Optional[float]] = mapped_column(Float)
    stock: Mapped[Optional[int]] = mapped_column(Integer)
    category_id: Mapped[Optional[str]] = mapped_column(
        String(Identifiers.LENGTH), ForeignKey("category.id", ondelete="SET NULL"), index=True
    )
    brand_id: Mapped[Optional[str]] = mapped_column(
        String(Identifiers.LENGTH), ForeignKey("brand.id", ondelete="SET NULL"), index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    category: Mapped[Optional["Category"]] = relationship(back_populates="products")
    brand: Mapped[Optional["Brand"]] = relationship(back_populates="products")
    colors: Mapped[list["ColorVariant"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ColorVariant.position",
        collection_class=ordering_list("position"),
    )

    __mapper_args__ = {"version_id_col": version}

    def find_color(self, color_id: str) -> Optional["ColorVariant"]:
        """Color variant with the given id, or None."""
        return next((c for c in self.colors if c.id == color_id), None)

    def image_names(self) -> set[str]:
        """Filenames referenced by this product's colors."""
        return {c.image for c in self.colors if c.image}


class ColorVariant(ObjectIdMixin, Base):
    """A color of a product, with its own image and sizes."""

    __tablename__ = "product_color"

    product_id: Mapped[str] = mapped_column(
        String(Identifiers.LENGTH), ForeignKey("product.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    color: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[Optional[str]] = mapped_column(Text)

    product: Mapped["Product"] = relationship(back_populates="colors")
    sizes: Mapped[list["SizeVariant"]] = relationship(
        back_populates="color_variant",
        cascade="all, delete-orphan",
        order_by="SizeVariant.position",
        collection_class=ordering_list("position"),
    )

    __table_args__ = (
        Index("ix_product_color_product_position", "product_id", "position"),
    )

    def find_size(self, size_id: str) -> Optional["SizeVariant"]:
        """Size variant with the given id, or None."""
        return next((s for s in self.sizes if s.id == size_id), None)


class SizeVariant(ObjectIdMixin, Base):
    """A size of a color variant, with its own stock and price."""

    __tablename__ = "product_size"

    color_id: Mapped[str] = mapped_column(
        String(Identifiers.LENGTH), ForeignKey("product_color.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    size: Mapped[str] = mapped_column(Text, nullable=False)
    stock: Mapped[Optional[int]] = mapped_column(Integer)
    price: Mapped[Optional[float]] = mapped_column(Float)

    color_variant: Mapped["ColorVariant"] = relationship(back_populates="sizes")

    __table_args__ = (
        Index("ix_product_size_color_position", "color_id", "position"),
    )
