"""
Product Service - write reconciliation and queries for products.

Handles:
- Listing and lookup with category/brand expansion
- Create with category/brand resolution and color image uploads
- Targeted update of a product, one of its colors, or one size of a color
- Delete with image cleanup

Uploaded files are paired with the ``colors`` array by position: the Nth
file belongs to the Nth color entry. An index missing on either side is
skipped with a warning.

Image lifecycle ordering:
- new files are written before anything is committed
- images that are no longer referenced are deleted only after the commit
- if anything fails before the commit, the new files are deleted again

Usage:
    from catalog_api.services.domain import ProductService

    service = ProductService(db, image_store)
    product = await service.create_product(payload, uploads)
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Sequence, TypeVar

import pydantic
from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from starlette.concurrency import run_in_threadpool

from catalog_api.models import Product, ColorVariant, SizeVariant
from catalog_api.repositories import ProductFilters, get_product_repository
from catalog_api.services.media import ImageStore, UploadedFile
from catalog_shared.config.constants import ProductFields
from catalog_shared.config.logging import get_logger
from catalog_shared.infrastructure.db import safe_commit
from catalog_shared.utils.exceptions import (
    ConflictError,
    DocumentValidationError,
    InvalidFormatError,
    InvalidIdentifierError,
    NotFoundError,
)
from catalog_shared.utils.schemas import (
    ColorInput,
    ColorPatch,
    ProductCreate,
    ProductListOutput,
    ProductOutput,
    ProductPatch,
    SizeInput,
    SizePatch,
)
from catalog_shared.utils.validators import is_valid_object_id
from .reference_resolver import ReferenceResolver

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def decode_colors(payload: dict[str, Any]) -> list[dict[str, Any]] | None:
    """
    Normalize ``payload["colors"]`` to a list of dicts, in place.

    Multipart forms carry the array as JSON text; JSON bodies carry it as a
    list. Anything that is not a list of objects raises InvalidFormatError.
    Returns None when the payload has no colors.
    """
    if ProductFields.COLORS not in payload:
        return None

    raw = payload[ProductFields.COLORS]
    if isinstance(raw, str):
        if not raw.strip():
            payload.pop(ProductFields.COLORS)
            return None
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise InvalidFormatError(ProductFields.COLORS) from exc

    if not isinstance(raw, list) or not all(isinstance(entry, dict) for entry in raw):
        raise InvalidFormatError(ProductFields.COLORS)

    colors = [dict(entry) for entry in raw]
    payload[ProductFields.COLORS] = colors
    return colors


def validate_schema(schema: type[SchemaT], data: dict[str, Any]) -> SchemaT:
    """Validate ``data`` against ``schema``; failures become DocumentValidationError."""
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise DocumentValidationError.from_pydantic(exc) from exc


class ProductService:
    """
    Service for product management.

    Business rules:
    - category/brands arrive as names and are stored as references; unknown
      names are dropped from the payload
    - the Nth uploaded file becomes the image of the Nth color entry
    - updates target the product, a color (color_id) or a size
      (color_id + size_id); a size id that does not exist appends a new size
    - a stale version on save is reported as a conflict
    - a client-supplied color image name is kept only when the product
      already owns that file
    """

    def __init__(self, db: Session, image_store: ImageStore):
        self._db = db
        self._images = image_store
        self._repo = get_product_repository(db)
        self._resolver = ReferenceResolver(db)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_products(
        self,
        *,
        skip: int = 0,
        limit: int = 10,
        q: str | None = None,
        category: str | None = None,
        brands: str | None = None,
    ) -> ProductListOutput:
        """
        One page of products plus the total count for the same filter.

        An unknown category or brand name does not narrow the result: that
        filter is simply left out.
        """
        filters = ProductFilters(limit=limit, offset=skip, search=q or None)
        if category:
            filters.category_id = self._resolver.resolve(ProductFields.CATEGORY, category)
        if brands:
            filters.brand_id = self._resolver.resolve(ProductFields.BRANDS, brands)

        count = self._repo.count(filters)
        products = self._repo.find_all(filters)

        return ProductListOutput(
            data=[self.to_output(p) for p in products],
            count=count,
        )

    def get_product(self, product_id: str) -> ProductOutput:
        """Single product with category and brand expanded."""
        product = self._repo.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return self.to_output(product)

    # =========================================================================
    # Create Operations
    # =========================================================================

    async def create_product(
        self,
        payload: dict[str, Any],
        uploads: Sequence[UploadedFile] = (),
    ) -> ProductOutput:
        """
        Create a product from a request payload and its uploaded files.

        The product row is only written once every file copy has settled; a
        failed copy fails the whole request. Session work runs in the
        threadpool so the event loop keeps serving other requests.
        """
        payload = dict(payload)
        colors = decode_colors(payload)
        await run_in_threadpool(self._resolver.resolve_payload, payload)
        self._drop_foreign_images(payload, colors, owned=set())

        stored = await self._attach_images(uploads, colors)

        try:
            product_id = await run_in_threadpool(self._insert_product, payload)
        except Exception:
            await run_in_threadpool(self._db.rollback)
            await self._images.remove_many(stored)
            raise

        logger.info("Product created", product_id=product_id, images=len(stored))
        return await run_in_threadpool(self._load_output, product_id)

    def _insert_product(self, payload: dict[str, Any]) -> str:
        data = validate_schema(ProductCreate, payload)
        product = Product(
            name=data.name,
            description=data.description,
            price=data.price,
            stock=data.stock,
            category_id=data.category,
            brand_id=data.brands,
            colors=[self._build_color(entry) for entry in data.colors],
        )
        self._repo.add(product)
        safe_commit(self._db)
        return product.id

    # =========================================================================
    # Update Operations
    # =========================================================================

    async def update_product(
        self,
        product_id: str,
        payload: dict[str, Any],
        uploads: Sequence[UploadedFile] = (),
        *,
        color_id: str | None = None,
        size_id: str | None = None,
    ) -> ProductOutput:
        """
        Apply a partial update.

        Precedence: color_id + size_id targets a size, color_id alone targets
        a color, neither targets the product itself.
        """
        product = await run_in_threadpool(self._repo.find_by_id, product_id)
        if product is None:
            raise NotFoundError("Product", product_id)

        payload = dict(payload)
        colors = decode_colors(payload)
        await run_in_threadpool(self._resolver.resolve_payload, payload)

        color: ColorVariant | None = None
        if color_id:
            color = product.find_color(color_id)
            if color is None:
                raise NotFoundError("Color", color_id, product_id=product_id)

        images_before = product.image_names()
        self._drop_foreign_images(payload, colors, owned=images_before)
        stored = await self._attach_images(uploads, colors, existing=list(product.colors))

        try:
            images_after = await run_in_threadpool(
                self._apply_update, product, color, size_id, payload
            )
        except StaleDataError as exc:
            await run_in_threadpool(self._db.rollback)
            await self._images.remove_many(stored)
            raise ConflictError(
                "Product was modified concurrently, retry the request",
                product_id=product_id,
            ) from exc
        except Exception:
            await run_in_threadpool(self._db.rollback)
            await self._images.remove_many(stored)
            raise

        obsolete = (images_before | set(stored)) - images_after
        removed = await self._images.remove_many(sorted(obsolete))

        logger.info(
            "Product updated",
            product_id=product_id,
            color_id=color_id,
            size_id=size_id,
            images_stored=len(stored),
            images_removed=removed,
        )
        return await run_in_threadpool(self._load_output, product_id)

    def _apply_update(
        self,
        product: Product,
        color: ColorVariant | None,
        size_id: str | None,
        payload: dict[str, Any],
    ) -> set[str]:
        """Merge onto the target, commit, and return the images still referenced."""
        if color is not None and size_id:
            self._merge_size(color, size_id, payload)
        elif color is not None:
            self._merge_color(color, payload)
        else:
            self._merge_product(product, payload)

        product.touch()
        safe_commit(self._db)
        return product.image_names()

    def _merge_product(self, product: Product, payload: dict[str, Any]) -> None:
        """Shallow merge onto the product's top-level fields."""
        patch = validate_schema(ProductPatch, payload)
        fields = patch.model_dump(
            exclude_unset=True,
            exclude={ProductFields.COLORS, ProductFields.CATEGORY, ProductFields.BRANDS},
        )
        for key, value in fields.items():
            setattr(product, key, value)

        if ProductFields.CATEGORY in patch.model_fields_set:
            product.category_id = patch.category
        if ProductFields.BRANDS in patch.model_fields_set:
            product.brand_id = patch.brands
        if patch.colors is not None:
            self._replace_colors(product, patch.colors)

    def _merge_color(self, color: ColorVariant, payload: dict[str, Any]) -> None:
        """Shallow merge onto one color."""
        patch = validate_schema(ColorPatch, payload)
        fields = patch.model_dump(exclude_unset=True, exclude={"sizes"})
        for key, value in fields.items():
            setattr(color, key, value)
        if patch.sizes is not None:
            self._replace_sizes(color, patch.sizes)

    def _merge_size(self, color: ColorVariant, size_id: str, payload: dict[str, Any]) -> None:
        """Shallow merge onto one size, or append the payload as a new size."""
        size = color.find_size(size_id)
        if size is None:
            entry = validate_schema(SizeInput, payload)
            color.sizes.append(self._build_size(entry))
            logger.info("Size not found, appended new size", color_id=color.id, size_id=size_id)
            return

        patch = validate_schema(SizePatch, payload)
        for key, value in patch.model_dump(exclude_unset=True).items():
            setattr(size, key, value)

    def _replace_colors(self, product: Product, entries: list[ColorInput]) -> None:
        """
        Replace the color collection. Entries carrying the id of an existing
        color update that color in place; the rest are created. Colors left
        out are deleted with their sizes.
        """
        existing = {c.id: c for c in product.colors}
        colors: list[ColorVariant] = []
        for entry in entries:
            color = existing.pop(entry.id, None) if entry.id else None
            if color is None:
                colors.append(self._build_color(entry))
                continue
            for key, value in entry.model_dump(exclude_unset=True, exclude={"id", "sizes"}).items():
                setattr(color, key, value)
            if entry.sizes is not None:
                self._replace_sizes(color, entry.sizes)
            colors.append(color)

        product.colors = colors
        product.colors.reorder()

    def _replace_sizes(self, color: ColorVariant, entries: list[SizeInput]) -> None:
        existing = {s.id: s for s in color.sizes}
        sizes: list[SizeVariant] = []
        for entry in entries:
            size = existing.pop(entry.id, None) if entry.id else None
            if size is None:
                sizes.append(self._build_size(entry))
                continue
            for key, value in entry.model_dump(exclude_unset=True, exclude={"id"}).items():
                setattr(size, key, value)
            sizes.append(size)

        color.sizes = sizes
        color.sizes.reorder()

    # =========================================================================
    # Delete Operations
    # =========================================================================

    async def delete_product(self, product_id: str) -> None:
        """
        Delete a product, then the image files of its colors.

        The id format is checked first so a malformed id never reaches the
        database.
        """
        if not is_valid_object_id(product_id):
            raise InvalidIdentifierError("Product", product_id)

        product = await run_in_threadpool(self._repo.find_by_id, product_id)
        if product is None:
            raise NotFoundError("Product", product_id)

        images = [c.image for c in product.colors if c.image]
        if not images:
            logger.info("No color images recorded for product", product_id=product_id)

        await run_in_threadpool(self._delete_row, product)

        removed = await self._images.remove_many(images)
        logger.info("Product deleted", product_id=product_id, images_removed=removed)

    def _delete_row(self, product: Product) -> None:
        self._repo.delete(product)
        safe_commit(self._db)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _attach_images(
        self,
        uploads: Sequence[UploadedFile],
        colors: list[dict[str, Any]] | None,
        existing: list[ColorVariant] | None = None,
    ) -> list[str]:
        """
        Store each upload that has a matching color entry and set that
        entry's ``image``. On update (``existing`` given) the persisted color
        at the same index must exist too.

        Copies run concurrently. If one fails, the copies that did succeed are
        deleted and the first error is raised.
        """
        if not uploads or not colors:
            if uploads:
                logger.info("Files received without colors, ignoring them", files=len(uploads))
            return []

        pairs: list[tuple[int, UploadedFile]] = []
        for index, upload in enumerate(uploads):
            has_color = index < len(colors)
            has_existing = existing is None or index < len(existing)
            if has_color and has_existing:
                pairs.append((index, upload))
            else:
                logger.warning(
                    "File or color entry is missing",
                    index=index,
                    filename=upload.original_name,
                )

        results = await asyncio.gather(
            *(self._images.store(upload) for _, upload in pairs),
            return_exceptions=True,
        )

        stored = [r for r in results if isinstance(r, str)]
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            await self._images.remove_many(stored)
            raise failures[0]

        for (index, _), filename in zip(pairs, results):
            colors[index]["image"] = filename

        return stored

    @staticmethod
    def _build_size(entry: SizeInput) -> SizeVariant:
        return SizeVariant(size=entry.size, stock=entry.stock, price=entry.price)

    def _build_color(self, entry: ColorInput) -> ColorVariant:
        return ColorVariant(
            color=entry.color,
            image=entry.image,
            sizes=[self._build_size(s) for s in entry.sizes or []],
        )

    @staticmethod
    def _drop_foreign_images(
        payload: dict[str, Any],
        colors: list[dict[str, Any]] | None,
        owned: set[str],
    ) -> None:
        """
        Remove client-supplied image names the product does not own yet.

        Image files are deleted together with the color that names them, so
        a color may only keep a name from its own product or from this
        request's uploads.
        """
        for entry in [payload, *(colors or [])]:
            image = entry.get("image")
            if isinstance(image, str) and image and image not in owned:
                logger.warning("Ignoring image not owned by the product", image=image)
                entry.pop("image")

    @staticmethod
    def to_output(product: Product) -> ProductOutput:
        return ProductOutput.model_validate(product)

    def _load_output(self, product_id: str) -> ProductOutput:
        return self.to_output(self._repo.reload(product_id))


def get_product_service(db: Session, image_store: ImageStore) -> ProductService:
    """Factory function for dependency injection."""
    return ProductService(db, image_store)
