# workspace_rbac/adapters/outbound/persistence/repositories/impersonation_session_repository.py

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from workspace_rbac.adapters.outbound.persistence.models import ImpersonationSession
from workspace_rbac.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from workspace_rbac.domain.exceptions import DatabaseOperationException
from workspace_rbac.domain.models.impersonation import ImpersonationStatus


class AsyncImpersonationSessionCRUD(AsyncCRUDBase[ImpersonationSession]):

    def _active_query(self):
        return select(ImpersonationSession).where(
            ImpersonationSession.status == ImpersonationStatus.ACTIVE,
            ImpersonationSession.is_active == true(),
        )

    async def get_active_for_impersonator(self, db: AsyncSession, impersonator_id: UUID) -> Optional[ImpersonationSession]:
        try:
            stmt = self._active_query().where(ImpersonationSession.impersonator_id == impersonator_id)
            result = await db.execute(stmt.limit(1))
            return result.scalars().first()
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao buscar sessão ativa de {impersonator_id}: {e}")
            raise DatabaseOperationException("Erro ao buscar sessão de impersonação ativa.", original_error=e)

    async def get_active_by_id(self, db: AsyncSession, session_id: UUID) -> Optional[ImpersonationSession]:
        try:
            stmt = self._active_query().where(ImpersonationSession.id == session_id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao buscar sessão {session_id}: {e}")
            raise DatabaseOperationException("Erro ao buscar sessão de impersonação.", original_error=e)

    async def list_active(self, db: AsyncSession) -> List[ImpersonationSession]:
        """Sessões ativas, mais recentes primeiro."""
        try:
            stmt = self._active_query().order_by(ImpersonationSession.started_at.desc())
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao listar sessões ativas: {e}")
            raise DatabaseOperationException("Erro ao listar sessões ativas.", original_error=e)

    async def list_history(self, db: AsyncSession, impersonator_id: UUID, limit: int) -> List[ImpersonationSession]:
        try:
            stmt = (
                select(ImpersonationSession)
                .where(ImpersonationSession.impersonator_id == impersonator_id)
                .order_by(ImpersonationSession.started_at.desc())
                .limit(limit)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao buscar histórico de {impersonator_id}: {e}")
            raise DatabaseOperationException("Erro ao buscar histórico de impersonação.", original_error=e)


impersonation_session_repository = AsyncImpersonationSessionCRUD(ImpersonationSession)
