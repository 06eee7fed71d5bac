"""
Repository Pattern implementation.
Centralizes data access with guaranteed eager loading.

Usage:
    from catalog_api.repositories import get_product_repository, ProductFilters

    repo = get_product_repository(db)
    products = repo.find_all(ProductFilters(search="boot", limit=10))
    product = repo.find_by_id("65a1f0c2e4b0a1b2c3d4e5f6")
"""

from .base import BaseRepository, RepositoryFilters
from .product import ProductRepository, ProductFilters, get_product_repository
from .reference import ReferenceRepository, get_category_repository, get_brand_repository

__all__ = [
    # Base
    "BaseRepository",
    "RepositoryFilters",
    # Product
    "ProductRepository",
    "ProductFilters",
    "get_product_repository",
    # Category / Brand lookups
    "ReferenceRepository",
    "get_category_repository",
    "get_brand_repository",
]
