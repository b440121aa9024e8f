# workspace_rbac/adapters/outbound/persistence/repositories/workspace_repository.py

"""
Async repositories for Workspace and UserWorkspace (membership).
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from workspace_rbac.adapters.outbound.persistence.models import UserWorkspace, Workspace
from workspace_rbac.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from workspace_rbac.application.ports.outbound import IWorkspaceRepository
from workspace_rbac.domain.exceptions import DatabaseOperationException


class AsyncWorkspaceCRUD(AsyncCRUDBase[Workspace], IWorkspaceRepository):
    """Workspace store plus the membership queries built on it."""

    async def get_many(self, db: AsyncSession, workspace_ids: List[UUID]) -> List[Workspace]:
        if not workspace_ids:
            return []
        try:
            result = await db.execute(select(Workspace).where(Workspace.id.in_(workspace_ids)))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao buscar workspaces: {e}")
            raise DatabaseOperationException("Erro ao buscar workspaces.", original_error=e)

    async def get_membership(self, db: AsyncSession, user_id: UUID, workspace_id: UUID) -> Optional[UserWorkspace]:
        """Vínculo ativo do usuário com o workspace, se houver."""
        try:
            stmt = select(UserWorkspace).where(
                UserWorkspace.user_id == user_id,
                UserWorkspace.workspace_id == workspace_id,
                UserWorkspace.is_active == true(),
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao buscar vínculo do usuário {user_id} com workspace {workspace_id}: {e}")
            raise DatabaseOperationException("Erro ao buscar vínculo com workspace.", original_error=e)

    async def list_user_memberships(self, db: AsyncSession, user_id: UUID) -> List[UserWorkspace]:
        try:
            stmt = (
                select(UserWorkspace)
                .where(UserWorkspace.user_id == user_id, UserWorkspace.is_active == true())
                .order_by(UserWorkspace.created_at)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao listar vínculos do usuário {user_id}: {e}")
            raise DatabaseOperationException("Erro ao listar workspaces do usuário.", original_error=e)

    async def list_workspace_memberships(self, db: AsyncSession, workspace_id: UUID) -> List[UserWorkspace]:
        try:
            stmt = (
                select(UserWorkspace)
                .where(UserWorkspace.workspace_id == workspace_id, UserWorkspace.is_active == true())
                .order_by(UserWorkspace.created_at)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao listar membros do workspace {workspace_id}: {e}")
            raise DatabaseOperationException("Erro ao listar membros do workspace.", original_error=e)


workspace_repository = AsyncWorkspaceCRUD(Workspace)
user_workspace_repository = AsyncCRUDBase(UserWorkspace)
