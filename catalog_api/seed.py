"""
Seed data for development and testing.
Creates the categories and brands products refer to by name.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_api.models import Brand, Category
from catalog_shared.config.logging import get_logger

logger = get_logger(__name__)


DEFAULT_CATEGORIES = ["Sneakers", "Boots", "Sandals", "T-Shirts", "Jackets"]
DEFAULT_BRANDS = ["Adidas", "Nike", "Puma", "Reebok", "New Balance"]


def _seed_names(db: Session, model: type[Category] | type[Brand], names: list[str]) -> int:
    existing = set(db.scalars(select(model.name)).all())
    created = 0
    for name in names:
        if name in existing:
            continue
        db.add(model(name=name))
        existing.add(name)
        created += 1
    return created


def seed(
    db: Session,
    categories: list[str] | None = None,
    brands: list[str] | None = None,
) -> dict[str, int]:
    """
    Insert categories and brands that are not there yet.
    Idempotent: names already present are skipped.
    Returns how many rows of each kind were created.
    """
    result = {
        "categories": _seed_names(db, Category, categories or DEFAULT_CATEGORIES),
        "brands": _seed_names(db, Brand, brands or DEFAULT_BRANDS),
    }
    db.commit()
    logger.info("Seed completed", **result)
    return result
