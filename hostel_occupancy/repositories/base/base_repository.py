"""
Base repository with standardized CRUD operations and error translation.

Repositories only flush; committing is left to the service that owns the
unit of work. Every SQLAlchemy failure is re-raised as
`ExternalSourceUnavailable` so callers see one typed error per data source.
"""

from typing import Any, Dict, Generic, List, NoReturn, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_occupancy.core.exceptions import DuplicateEntryError, ExternalSourceUnavailable
from hostel_occupancy.core.logging import get_logger
from hostel_occupancy.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so user text is matched literally."""
    return (
        value.replace(escape, escape + escape)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    Provides CRUD operations and error handling for all domain repositories.
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

    @property
    def source_name(self) -> str:
        return self.model.__tablename__

    def _unavailable(self, operation: str, exc: SQLAlchemyError) -> NoReturn:
        logger.error(
            f"{self.model.__name__} {operation} failed: {exc}",
            extra={"source": self.source_name, "operation": operation},
        )
        raise ExternalSourceUnavailable(self.source_name, operation, str(exc)) from exc

    # ==================== Create Operations ====================

    def add(self, entity: ModelType) -> ModelType:
        """
        Stage a new entity and flush it so generated ids are available.

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            ExternalSourceUnavailable: On any other database failure
        """
        try:
            self.db.add(entity)
            self.db.flush()
            logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
            return entity
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEntryError(self.model.__name__, "unique constraint", str(e.orig)) from e
        except SQLAlchemyError as e:
            self._unavailable("add", e)

    def add_many(self, entities: List[ModelType]) -> List[ModelType]:
        try:
            self.db.add_all(entities)
            self.db.flush()
            return entities
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEntryError(self.model.__name__, "unique constraint", str(e.orig)) from e
        except SQLAlchemyError as e:
            self._unavailable("add_many", e)

    # ==================== Read Operations ====================

    def get_by_id(self, id: str) -> Optional[ModelType]:
        """
        Find entity by ID.

        Returns:
            Entity or None
        """
        try:
            return self.db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            self._unavailable("get_by_id", e)

    # ==================== Update Operations ====================

    def update(self, entity: ModelType, data: Dict[str, Any]) -> ModelType:
        """Apply field values to a loaded entity and flush."""
        try:
            for key, value in data.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            self.db.flush()
            return entity
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEntryError(self.model.__name__, "unique constraint", str(e.orig)) from e
        except SQLAlchemyError as e:
            self._unavailable("update", e)

    # ==================== Delete Operations ====================

    def delete(self, entity: ModelType) -> None:
        try:
            self.db.delete(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            self._unavailable("delete", e)
