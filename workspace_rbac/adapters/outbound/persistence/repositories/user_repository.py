# workspace_rbac/adapters/outbound/persistence/repositories/user_repository.py

"""
Async repository for User entity (user_repository.py).

Read-side access to the identity store. User lifecycle (registration,
credentials) is owned elsewhere.
"""

from typing import List
from uuid import UUID

from sqlalchemy import select, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from workspace_rbac.adapters.outbound.persistence.models import User
from workspace_rbac.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from workspace_rbac.application.ports.outbound import IUserRepository
from workspace_rbac.domain.exceptions import DatabaseOperationException


class AsyncUserCRUD(AsyncCRUDBase[User], IUserRepository):
    """
    Concrete repository for User entity, fully async.

    Extends AsyncCRUDBase and implements IUserRepository.
    """

    async def list_active_except(self, db: AsyncSession, user_id: UUID) -> List[User]:
        """Usuários ativos, exceto o informado, ordenados por email."""
        try:
            stmt = (
                select(User)
                .where(User.is_active == true(), User.id != user_id)
                .order_by(User.email)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao listar usuários ativos: {e}")
            raise DatabaseOperationException("Erro ao listar usuários ativos.", original_error=e)

    async def get_many(self, db: AsyncSession, user_ids: List[UUID]) -> List[User]:
        if not user_ids:
            return []
        try:
            result = await db.execute(select(User).where(User.id.in_(user_ids)))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao buscar usuários: {e}")
            raise DatabaseOperationException("Erro ao buscar usuários.", original_error=e)


user_repository = AsyncUserCRUD(User)
