"""
Reference Repository - name lookups for Category and Brand.
"""

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_api.models import Brand, Category
from catalog_shared.utils.validators import escape_like_pattern

NamedT = TypeVar("NamedT", Category, Brand)


class ReferenceRepository(Generic[NamedT]):
    """
    Read-only access to an entity identified by its name.

    Usage:
        repo = ReferenceRepository(db, Category)
        category = repo.find_first_by_name("shoe")
    """

    def __init__(self, db: Session, model: type[NamedT]):
        self._db = db
        self._model = model

    def find_first_by_name(self, text: str) -> NamedT | None:
        """
        First entity whose name contains ``text``, ignoring case.

        The text is matched literally (LIKE wildcards are escaped) and is not
        anchored. Ties are broken by insertion order.
        """
        pattern = f"%{escape_like_pattern(text)}%"
        query = (
            select(self._model)
            .where(self._model.name.ilike(pattern, escape="\\"))
            .order_by(self._model.created_at, self._model.id)
            .limit(1)
        )
        return self._db.scalar(query)


def get_category_repository(db: Session) -> ReferenceRepository[Category]:
    """Factory function for dependency injection."""
    return ReferenceRepository(db, Category)


def get_brand_repository(db: Session) -> ReferenceRepository[Brand]:
    """Factory function for dependency injection."""
    return ReferenceRepository(db, Brand)
