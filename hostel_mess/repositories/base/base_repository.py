"""
Base repository with standardized CRUD operations and error handling.

Repositories never commit: the calling service owns the transaction and
decides when to commit or roll back. Integrity and stale-version errors
are passed through untouched so services can map them to named domain
errors; any other storage failure is wrapped in ``RepositoryError``.
"""

from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from hostel_mess.core.exceptions import RepositoryError, ResourceNotFoundError
from hostel_mess.core.logging import get_logger
from hostel_mess.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository over a single model.

    Provides create/read/update/delete helpers and row locking.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add and flush a new entity.

        Raises:
            IntegrityError: unique or check constraint violated
            RepositoryError: any other storage failure
        """
        try:
            self.db.add(entity)
            self.db.flush()
            logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
            return entity
        except (IntegrityError, StaleDataError):
            raise
        except SQLAlchemyError as e:
            raise RepositoryError(f"Create failed: {str(e)}") from e

    # ==================== Read Operations ====================

    def find_by_id(self, id: str) -> Optional[ModelType]:
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by ID failed: {str(e)}") from e

    def get_by_id(self, id: str) -> ModelType:
        """
        Get entity by ID or raise.

        Raises:
            ResourceNotFoundError: If entity not found
        """
        entity = self.find_by_id(id)
        if entity is None:
            raise self._not_found(id)
        return entity

    def lock_by_id(self, id: str) -> ModelType:
        """
        Load the row with ``SELECT ... FOR UPDATE`` and refresh it.

        The lock is held until the surrounding transaction ends.
        """
        try:
            stmt = (
                select(self.model)
                .where(self.model.id == id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            entity = self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Lock failed: {str(e)}") from e
        if entity is None:
            raise self._not_found(id)
        return entity

    def find_by_criteria(
        self,
        criteria: Dict[str, Any],
        order_by: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        Find entities matching equality criteria.

        Args:
            criteria: Filter criteria as key-value pairs; list values use IN
            order_by: Field names, prefix with - for descending
            limit: Maximum number of records
        """
        try:
            stmt = select(self.model)
            for key, value in criteria.items():
                column = getattr(self.model, key)
                if isinstance(value, (list, tuple, set)):
                    stmt = stmt.where(column.in_(list(value)))
                else:
                    stmt = stmt.where(column == value)

            for field in order_by or ():
                if field.startswith("-"):
                    stmt = stmt.order_by(getattr(self.model, field[1:]).desc())
                else:
                    stmt = stmt.order_by(getattr(self.model, field))

            if limit is not None:
                stmt = stmt.limit(limit)

            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by criteria failed: {str(e)}") from e

    def find_one_by_criteria(self, criteria: Dict[str, Any]) -> Optional[ModelType]:
        results = self.find_by_criteria(criteria, limit=1)
        return results[0] if results else None

    def count(self, criteria: Optional[Dict[str, Any]] = None) -> int:
        try:
            stmt = select(func.count()).select_from(self.model)
            for key, value in (criteria or {}).items():
                stmt = stmt.where(getattr(self.model, key) == value)
            return int(self.db.execute(stmt).scalar_one())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Count failed: {str(e)}") from e

    # ==================== Update Operations ====================

    def update(self, entity: ModelType, data: Dict[str, Any]) -> ModelType:
        """
        Apply changes and flush.

        Models with a ``version`` column are checked by the mapper; a lost
        race surfaces as ``StaleDataError``.
        """
        try:
            for key, value in data.items():
                if not hasattr(entity, key):
                    raise AttributeError(f"{self.model.__name__} has no field '{key}'")
                setattr(entity, key, value)
            self.db.flush()
            return entity
        except (IntegrityError, StaleDataError):
            raise
        except SQLAlchemyError as e:
            raise RepositoryError(f"Update failed: {str(e)}") from e

    # ==================== Delete Operations ====================

    def delete(self, entity: ModelType) -> None:
        try:
            self.db.delete(entity)
            self.db.flush()
            logger.debug(f"Deleted {self.model.__name__} with id: {entity.id}")
        except (IntegrityError, StaleDataError):
            raise
        except SQLAlchemyError as e:
            raise RepositoryError(f"Delete failed: {str(e)}") from e

    # ==================== Helpers ====================

    def _not_found(self, id: str) -> ResourceNotFoundError:
        """Error raised by ``get_by_id``; repositories override with a specific type."""
        return ResourceNotFoundError(self.model.__name__, id)
