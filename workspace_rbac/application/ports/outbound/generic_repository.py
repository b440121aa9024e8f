# workspace_rbac/application/ports/outbound/generic_repository.py

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, Any

from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class IRepository(Generic[T], ABC):
    """Generic repository interface."""

    @abstractmethod
    async def get(self, db: AsyncSession, id: Any) -> Optional[T]:
        pass

    @abstractmethod
    async def exists(self, db: AsyncSession, **filters) -> bool:
        pass
