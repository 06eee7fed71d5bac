"""
API routers.

- products: product CRUD, color/size updates, image uploads
"""

from .products import router as products_router

__all__ = ["products_router"]
