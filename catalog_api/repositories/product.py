"""
Product Repository - Data access for products.
Eager loading of category, brand, colors and sizes prevents N+1 queries.
"""

from dataclasses import dataclass
from sqlalchemy.orm import Session, selectinload, joinedload
from sqlalchemy import Select, select

from catalog_api.models import Product, ColorVariant
from catalog_shared.utils.validators import escape_like_pattern
from .base import BaseRepository, RepositoryFilters


@dataclass
class ProductFilters(RepositoryFilters):
    """Filters specific to products."""

    category_id: str | None = None
    brand_id: str | None = None


class ProductRepository(BaseRepository[Product]):
    """
    Repository for Product entities.

    Guarantees eager loading of:
    - category, brand
    - colors -> sizes
    """

    @property
    def model(self) -> type[Product]:
        return Product

    def _base_query(self) -> Select:
        return (
            select(Product)
            .options(joinedload(Product.category))
            .options(joinedload(Product.brand))
            .options(
                selectinload(Product.colors)
                .selectinload(ColorVariant.sizes)
            )
            # Insertion order, like a document collection scan
            .order_by(Product.created_at, Product.id)
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply product-specific filters."""
        if not isinstance(filters, ProductFilters):
            filters = ProductFilters(**filters.__dict__)

        # Name search (case-insensitive substring)
        if filters.search:
            search_term = f"%{escape_like_pattern(filters.search)}%"
            query = query.where(Product.name.ilike(search_term, escape="\\"))

        if filters.category_id:
            query = query.where(Product.category_id == filters.category_id)

        if filters.brand_id:
            query = query.where(Product.brand_id == filters.brand_id)

        return query

    def referenced_images(self) -> set[str]:
        """Every image filename recorded on any color."""
        query = select(ColorVariant.image).where(ColorVariant.image.is_not(None))
        return set(self._db.scalars(query).all())


def get_product_repository(db: Session) -> ProductRepository:
    """Factory function for dependency injection."""
    return ProductRepository(db)
