# workspace_rbac/adapters/outbound/persistence/repositories/permission_repository.py

from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from workspace_rbac.adapters.outbound.persistence.models import Permission
from workspace_rbac.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from workspace_rbac.domain.exceptions import DatabaseOperationException
from workspace_rbac.domain.models.permission import Action, Resource, get_permission_name


class AsyncPermissionCRUD(AsyncCRUDBase[Permission]):
    """Catalog queries. Rows are matched by their canonical name."""

    async def get_active_by_name(self, db: AsyncSession, name: str) -> Optional[Permission]:
        try:
            stmt = select(Permission).where(Permission.name == name, Permission.is_active == true())
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao buscar permissão '{name}': {e}")
            raise DatabaseOperationException("Erro ao buscar permissão.", original_error=e)

    async def get_active_by_resource_action(
            self, db: AsyncSession, resource: Resource, action: Action
    ) -> Optional[Permission]:
        return await self.get_active_by_name(db, get_permission_name(resource, action))

    async def get_existing_names(self, db: AsyncSession, names: Iterable[str]) -> set[str]:
        """Names already present in the catalog, active or not."""
        names = list(names)
        if not names:
            return set()
        try:
            result = await db.execute(select(Permission.name).where(Permission.name.in_(names)))
            return set(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao verificar permissões existentes: {e}")
            raise DatabaseOperationException("Erro ao verificar permissões existentes.", original_error=e)

    async def list_active_by_names(self, db: AsyncSession, names: Iterable[str]) -> List[Permission]:
        names = list(names)
        if not names:
            return []
        try:
            stmt = select(Permission).where(Permission.name.in_(names), Permission.is_active == true())
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao resolver permissões por nome: {e}")
            raise DatabaseOperationException("Erro ao resolver permissões.", original_error=e)

    async def list_active_by_ids(self, db: AsyncSession, ids: Iterable[UUID]) -> List[Permission]:
        ids = [UUID(str(i)) for i in ids]
        if not ids:
            return []
        try:
            stmt = (
                select(Permission)
                .where(Permission.id.in_(ids), Permission.is_active == true())
                .order_by(Permission.resource, Permission.action)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao buscar permissões por id: {e}")
            raise DatabaseOperationException("Erro ao buscar permissões.", original_error=e)

    async def list_active(
            self, db: AsyncSession, resource: Optional[Resource] = None, action: Optional[Action] = None
    ) -> List[Permission]:
        """Permissões ativas, ordenadas por recurso e ação."""
        try:
            stmt = select(Permission).where(Permission.is_active == true())
            if resource is not None:
                stmt = stmt.where(Permission.resource == Resource(resource).value)
            if action is not None:
                stmt = stmt.where(Permission.action == Action(action).value)
            result = await db.execute(stmt.order_by(Permission.resource, Permission.action))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Erro ao listar permissões: {e}")
            raise DatabaseOperationException("Erro ao listar permissões.", original_error=e)


permission_repository = AsyncPermissionCRUD(Permission)
