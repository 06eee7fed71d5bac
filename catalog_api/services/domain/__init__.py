"""
Domain Services - Application Layer.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from catalog_api.services.domain import ProductService

    service = ProductService(db, image_store)
    page = service.list_products(skip=0, limit=10, q="boot")
"""

from .reference_resolver import ReferenceResolver
from .product_service import ProductService, get_product_service, decode_colors

__all__ = [
    "ReferenceResolver",
    "ProductService",
    "get_product_service",
    "decode_colors",
]
