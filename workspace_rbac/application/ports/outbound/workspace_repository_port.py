# workspace_rbac/application/ports/outbound/workspace_repository_port.py

from abc import abstractmethod
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.application.ports.outbound.generic_repository import IRepository
from workspace_rbac.adapters.outbound.persistence.models.user_workspace_model import UserWorkspace
from workspace_rbac.adapters.outbound.persistence.models.workspace_model import Workspace


class IWorkspaceRepository(IRepository[Workspace]):
    """Workspace-store port."""

    @abstractmethod
    async def get_many(self, db: AsyncSession, workspace_ids: List[UUID]) -> List[Workspace]:
        pass

    @abstractmethod
    async def get_membership(self, db: AsyncSession, user_id: UUID, workspace_id: UUID) -> Optional[UserWorkspace]:
        pass
