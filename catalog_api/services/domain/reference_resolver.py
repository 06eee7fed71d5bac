"""
Resolution of free-text category/brand names to stored references.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from catalog_api.repositories import (
    ReferenceRepository,
    get_brand_repository,
    get_category_repository,
)
from catalog_shared.config.constants import ProductFields
from catalog_shared.config.logging import get_logger

logger = get_logger(__name__)


class ReferenceResolver:
    """
    Maps a human readable name to the id of the first Category or Brand whose
    name contains it (case-insensitive). Never raises: an unknown name simply
    resolves to None.

    Usage:
        resolver = ReferenceResolver(db)
        category_id = resolver.resolve(ProductFields.CATEGORY, "shoe")
        resolver.resolve_payload(payload)
    """

    KINDS = (ProductFields.CATEGORY, ProductFields.BRANDS)

    def __init__(self, db: Session):
        self._repos: dict[str, ReferenceRepository] = {
            ProductFields.CATEGORY: get_category_repository(db),
            ProductFields.BRANDS: get_brand_repository(db),
        }

    def resolve(self, kind: str, text: Any) -> str | None:
        """Reference id for ``text`` or None when nothing matches."""
        if not isinstance(text, str) or not text:
            return None
        entity = self._repos[kind].find_first_by_name(text)
        return entity.id if entity is not None else None

    def resolve_payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Replace category/brands names in ``payload`` with their ids, in place.

        A name that does not resolve is removed from the payload rather than
        stored as raw text.
        """
        for kind in self.KINDS:
            if kind not in payload:
                continue
            text = payload[kind]
            reference = self.resolve(kind, text)
            if reference is None:
                payload.pop(kind)
                if text:
                    logger.info("Unresolved reference dropped", field=kind, value=text)
            else:
                payload[kind] = reference
        return payload
