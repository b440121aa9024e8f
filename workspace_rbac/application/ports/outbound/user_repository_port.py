# workspace_rbac/application/ports/outbound/user_repository_port.py

from abc import abstractmethod
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.application.ports.outbound.generic_repository import IRepository
from workspace_rbac.adapters.outbound.persistence.models.user_model import User


class IUserRepository(IRepository[User]):
    """Identity-store port consumed by the permission core."""

    @abstractmethod
    async def list_active_except(self, db: AsyncSession, user_id: UUID) -> List[User]:
        pass

    @abstractmethod
    async def get_many(self, db: AsyncSession, user_ids: List[UUID]) -> List[User]:
        pass
