# workspace_rbac/adapters/outbound/persistence/repositories/base_repository.py

"""
Async Base Repository

Generic read helpers and flush-or-commit writes for SQLAlchemy models.
Every storage failure is logged and wrapped in DatabaseOperationException.

Writes take a ``commit`` flag: services that compose several writes into one
unit of work pass ``commit=False`` and commit themselves.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy.future import select
from pydantic import BaseModel
import logging

from workspace_rbac.adapters.outbound.persistence.models.base_model import Base
from workspace_rbac.domain.exceptions import (
    ResourceAlreadyExistsException,
    DatabaseOperationException,
)

# Define generic type for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)

# Configure logger
logger = logging.getLogger(__name__)


class AsyncCRUDBase(Generic[ModelType]):
    """
    Generic asynchronous CRUD base class.
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize the repository with an SQLAlchemy model.

        Args:
            model: SQLAlchemy model class associated with this repository
        """
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """Retrieve an object by ID."""
        try:
            query = select(self.model).where(self.model.id == id)
            result = await db.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching {self.model.__name__} with ID {id}: {str(e)}")
            raise DatabaseOperationException(
                message=f"Error fetching {self.model.__name__}", original_error=e
            )

    async def exists(self, db: AsyncSession, **filters) -> bool:
        """Check if a record exists matching the given filters."""
        try:
            query = select(self.model)
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.where(getattr(self.model, field) == value)

            result = await db.execute(query.limit(1))
            return result.scalars().first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking existence of {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(
                message=f"Error checking existence of {self.model.__name__}", original_error=e
            )

    async def create(
        self, db: AsyncSession, *, obj_in: Union[BaseModel, Dict[str, Any]], commit: bool = True
    ) -> ModelType:
        """
        Create a new record.

        Args:
            db: Async database session
            obj_in: Pydantic schema or dict with column values
            commit: Commit (True) or only flush (False)

        Raises:
            ResourceAlreadyExistsException: If the insert violates a unique constraint
            DatabaseOperationException: For other database errors
        """
        try:
            obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
            db_obj = self.model(**obj_in_data)

            db.add(db_obj)
            if commit:
                await db.commit()
                await db.refresh(db_obj)
            else:
                await db.flush()

            self.logger.info(f"{self.model.__name__} created with ID: {db_obj.id}")
            return db_obj

        except IntegrityError as e:
            await db.rollback()
            error_msg = str(e).lower()
            if "unique" in error_msg or "duplicate" in error_msg:
                self.logger.warning(f"Attempt to create duplicate {self.model.__name__}: {str(e)}")
                raise ResourceAlreadyExistsException(
                    detail=f"{self.model.__name__} with these data already exists"
                )
            self.logger.error(f"Integrity error creating {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(original_error=e)

        except SQLAlchemyError as e:
            await db.rollback()
            self.logger.error(f"Error creating {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(
                message=f"Error creating {self.model.__name__}", original_error=e
            )

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType,
        obj_in: Union[BaseModel, Dict[str, Any]], commit: bool = True
    ) -> ModelType:
        """Update an existing record with the given values."""
        try:
            update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)

            for field, value in update_data.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

            db.add(db_obj)
            if commit:
                await db.commit()
                await db.refresh(db_obj)
            else:
                await db.flush()

            self.logger.info(f"{self.model.__name__} with ID {db_obj.id} updated")
            return db_obj

        except SQLAlchemyError as e:
            await db.rollback()
            self.logger.error(f"Error updating {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(
                message=f"Error updating {self.model.__name__}", original_error=e
            )
