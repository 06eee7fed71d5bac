"""
Product endpoints.

Thin router that delegates to ProductService.
All business logic is in catalog_api/services/domain/product_service.py.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from catalog_api.routers._common import read_payload
from catalog_api.services.domain import get_product_service
from catalog_api.services.media import (
    ImageStore,
    UploadStager,
    get_image_store,
    get_upload_stager,
)
from catalog_shared.config.constants import Limits
from catalog_shared.infrastructure.db import get_db
from catalog_shared.utils.schemas import MessageOutput, ProductListOutput, ProductOutput


router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductListOutput)
def list_products(
    skip: int = Query(default=Limits.DEFAULT_SKIP, ge=0),
    limit: int = Query(default=Limits.DEFAULT_PAGE_SIZE, ge=1, le=Limits.MAX_PAGE_SIZE),
    q: str = "",
    category: str = "",
    brands: str = "",
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
) -> ProductListOutput:
    """
    List products, optionally searching by name and filtering by category or
    brand name. Unknown category/brand names are ignored as filters.
    """
    service = get_product_service(db, image_store)
    return service.list_products(
        skip=skip,
        limit=limit,
        q=q,
        category=category,
        brands=brands,
    )


@router.get("/{product_id}", response_model=ProductOutput)
def get_product(
    product_id: str,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
) -> ProductOutput:
    """Get a product with its category and brand expanded."""
    service = get_product_service(db, image_store)
    return service.get_product(product_id)


@router.post("", response_model=ProductOutput, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: Request,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
    stager: UploadStager = Depends(get_upload_stager),
) -> ProductOutput:
    """
    Create a product.

    Accepts a multipart form (``colors`` as JSON text, one file per color in
    the same order) or a JSON object.
    """
    service = get_product_service(db, image_store)
    payload, files = await read_payload(request)
    uploads = await stager.stage(files)
    try:
        return await service.create_product(payload, uploads)
    finally:
        await stager.discard(uploads)


async def _update(
    request: Request,
    db: Session,
    image_store: ImageStore,
    stager: UploadStager,
    product_id: str,
    color_id: str | None = None,
    size_id: str | None = None,
) -> ProductOutput:
    service = get_product_service(db, image_store)
    payload, files = await read_payload(request)
    uploads = await stager.stage(files)
    try:
        return await service.update_product(
            product_id,
            payload,
            uploads,
            color_id=color_id,
            size_id=size_id,
        )
    finally:
        await stager.discard(uploads)


@router.put("/{product_id}", response_model=ProductOutput)
async def update_product(
    product_id: str,
    request: Request,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
    stager: UploadStager = Depends(get_upload_stager),
) -> ProductOutput:
    """Update top-level product fields (and optionally replace its colors)."""
    return await _update(request, db, image_store, stager, product_id)


@router.put("/{product_id}/colors/{color_id}", response_model=ProductOutput)
async def update_product_color(
    product_id: str,
    color_id: str,
    request: Request,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
    stager: UploadStager = Depends(get_upload_stager),
) -> ProductOutput:
    """Update one color of a product."""
    return await _update(request, db, image_store, stager, product_id, color_id)


@router.put("/{product_id}/colors/{color_id}/sizes/{size_id}", response_model=ProductOutput)
async def update_product_size(
    product_id: str,
    color_id: str,
    size_id: str,
    request: Request,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
    stager: UploadStager = Depends(get_upload_stager),
) -> ProductOutput:
    """Update one size of a color; an unknown size id appends a new size."""
    return await _update(request, db, image_store, stager, product_id, color_id, size_id)


@router.delete("/{product_id}", response_model=MessageOutput)
async def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
) -> MessageOutput:
    """Delete a product and the image files of its colors."""
    service = get_product_service(db, image_store)
    await service.delete_product(product_id)
    return MessageOutput(message="Product deleted successfully")
