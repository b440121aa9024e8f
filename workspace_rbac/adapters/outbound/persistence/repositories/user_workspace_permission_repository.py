# workspace_rbac/adapters/outbound/persistence/repositories/user_workspace_permission_repository.py

"""
Async repository for grant records (UserWorkspacePermission).

Only active records are ever returned; deactivated rows are history.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from workspace_rbac.adapters.outbound.persistence.models import UserWorkspacePermission
from workspace_rbac.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from workspace_rbac.domain.exceptions import DatabaseOperationException


class AsyncUserWorkspacePermissionCRUD(AsyncCRUDBase[UserWorkspacePermission]):

    async def get_active(
            self, db: AsyncSession, user_id: UUID, workspace_id: UUID, *, for_update: bool = False
    ) -> Optional[UserWorkspacePermission]:
        """
        Registro ativo de (user_id, workspace_id).

        Args:
            for_update: lock the row (SELECT ... FOR UPDATE) for a read-modify-write
        """
        stmt = select(UserWorkspacePermission).where(
            UserWorkspacePermission.user_id == user_id,
            UserWorkspacePermission.workspace_id == workspace_id,
            UserWorkspacePermission.is_active == true(),
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active_for_user(self, db: AsyncSession, user_id: UUID) -> List[UserWorkspacePermission]:
        try:
            stmt = (
                select(UserWorkspacePermission)
                .where(UserWorkspacePermission.user_id == user_id, UserWorkspacePermission.is_active == true())
                .order_by(UserWorkspacePermission.created_at)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao listar permissões do usuário {user_id}: {e}")
            raise DatabaseOperationException("Erro ao listar permissões do usuário.", original_error=e)

    async def list_active_for_workspace(self, db: AsyncSession, workspace_id: UUID) -> List[UserWorkspacePermission]:
        try:
            stmt = (
                select(UserWorkspacePermission)
                .where(
                    UserWorkspacePermission.workspace_id == workspace_id,
                    UserWorkspacePermission.is_active == true(),
                )
                .order_by(UserWorkspacePermission.created_at)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao listar permissões do workspace {workspace_id}: {e}")
            raise DatabaseOperationException("Erro ao listar permissões do workspace.", original_error=e)


user_workspace_permission_repository = AsyncUserWorkspacePermissionCRUD(UserWorkspacePermission)
