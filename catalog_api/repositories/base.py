"""
Base Repository implementation.
Provides common data access patterns with guaranteed eager loading.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar, Generic, Sequence
from sqlalchemy.orm import Session
from sqlalchemy import Select, select, func

from catalog_shared.config.constants import Limits


ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Base filters for repository queries."""

    # Pagination
    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = Limits.DEFAULT_SKIP

    # Search
    search: str | None = None

    def __post_init__(self):
        """Validate and normalize filters."""
        self.limit = min(max(1, self.limit), Limits.MAX_PAGE_SIZE)
        self.offset = max(0, self.offset)
        if self.search:
            self.search = self.search.strip()[:Limits.MAX_SEARCH_TERM_LENGTH]


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: Return the SQLAlchemy model class
    - _base_query(): Return base query with eager loading
    - _apply_filters(): Add entity-specific WHERE clauses
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _base_query(self) -> Select:
        """
        Return base query with proper eager loading.
        Subclasses must implement this with selectinload/joinedload.
        """
        ...

    @abstractmethod
    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """
        Apply entity-specific filters to query.
        Must only add WHERE clauses so it can be reused for count().
        """
        ...

    def find_all(self, filters: RepositoryFilters | None = None) -> Sequence[ModelT]:
        """
        Find all entities matching filters, one page at a time.

        Args:
            filters: Optional filters (pagination included)

        Returns:
            List of entities
        """
        filters = filters or RepositoryFilters()
        query = self._apply_filters(self._base_query(), filters)
        query = query.offset(filters.offset).limit(filters.limit)

        return self._db.execute(query).scalars().unique().all()

    def find_by_id(self, entity_id: str) -> ModelT | None:
        """Find entity by ID, with relations loaded."""
        query = self._base_query().where(self.model.id == entity_id)
        return self._db.scalar(query)

    def reload(self, entity_id: str) -> ModelT | None:
        """
        Find entity by ID, overwriting any state already held in the session.
        Use after a commit so changed foreign keys show up as loaded relations.
        """
        query = (
            self._base_query()
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return self._db.scalar(query)

    def count(self, filters: RepositoryFilters | None = None) -> int:
        """
        Count entities matching filters.
        Pagination is ignored; the count covers every matching row.
        """
        filters = filters or RepositoryFilters()
        query = select(func.count()).select_from(self.model)
        query = self._apply_filters(query, filters)

        return self._db.scalar(query) or 0

    def add(self, entity: ModelT) -> ModelT:
        """Stage a new entity and flush so its defaults are populated."""
        self._db.add(entity)
        self._db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        """Hard delete entity (owned children cascade)."""
        self._db.delete(entity)
        self._db.flush()
