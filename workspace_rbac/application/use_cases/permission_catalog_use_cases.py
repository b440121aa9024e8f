# workspace_rbac/application/use_cases/permission_catalog_use_cases.py

"""
Service for the permission catalog.

Seeds the Resource x Action catalog into storage and exposes read accessors.
Seeding is idempotent: only names missing from the table are inserted, and
a concurrent seeder that wins the race on the unique name index counts as
"already present".
"""

import logging
from typing import Any, List, Optional

from fastapi_pagination import Params
from fastapi_pagination.ext.sqlalchemy import apaginate
from sqlalchemy import select, true
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.outbound.persistence.models import Permission
from workspace_rbac.adapters.outbound.persistence.repositories.permission_repository import permission_repository
from workspace_rbac.domain.exceptions import DatabaseOperationException, InvalidOperationException
from workspace_rbac.domain.models.permission import Action, PermissionData, Resource
from workspace_rbac.domain.services.permission_generator import permission_generator

logger = logging.getLogger(__name__)

# Tentativas de inserção quando outro seeder insere os mesmos nomes em paralelo
_SEED_ATTEMPTS = 3


class AsyncPermissionCatalogService:
    """Service layer for seeding and reading the permission catalog."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    # ────────────────────────────────
    # Helpers
    # ────────────────────────────────
    @staticmethod
    def _parse_resource(resource: Any) -> Resource:
        try:
            return Resource(resource)
        except ValueError:
            logger.warning(f"Unknown resource requested for seeding: {resource!r}")
            raise InvalidOperationException(
                f"Invalid resource: {resource}",
                details={"valid_resources": [r.value for r in Resource]},
            )

    async def _insert_missing(self, candidates: List[PermissionData]) -> int:
        """Insert the candidates whose name is not in the table yet. Returns the inserted count."""
        for attempt in range(1, _SEED_ATTEMPTS + 1):
            try:
                existing = await permission_repository.get_existing_names(self.db, (c.name for c in candidates))
                missing = [c for c in candidates if c.name not in existing]
                if not missing:
                    await self.db.commit()
                    return 0

                self.db.add_all([
                    Permission(
                        name=c.name,
                        description=c.description,
                        resource=c.resource.value,
                        action=c.action.value,
                        is_active=True,
                    )
                    for c in missing
                ])
                await self.db.commit()
                return len(missing)

            except IntegrityError as e:
                # outro seeder inseriu parte dos nomes; recalcula o que falta
                await self.db.rollback()
                logger.info(f"Concurrent seeding detected (attempt {attempt}): {e.orig}")
            except DatabaseOperationException:
                await self.db.rollback()
                raise
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.exception(f"Error seeding permissions: {str(e)}")
                raise DatabaseOperationException(message="Error seeding permissions", original_error=e)

        # Every retry lost the race, so everything is in place by now
        return 0

    # ────────────────────────────────
    # Seeding
    # ────────────────────────────────
    async def seed_all_permissions(self) -> int:
        """
        Insert every missing catalog entry.

        Returns:
            Number of permissions created by this call (0 when already seeded)
        """
        created = await self._insert_missing(permission_generator.generate_all_permissions())
        logger.info(f"Permission catalog seeded: {created} new permission(s)")
        return created

    async def seed_resource_permissions(self, resource: Any) -> int:
        """
        Insert the missing catalog entries of one resource.

        Raises:
            InvalidOperationException: If the resource is unknown
        """
        resource = self._parse_resource(resource)
        created = await self._insert_missing(permission_generator.generate_resource_permissions(resource))
        logger.info(f"Permissions seeded for resource '{resource.value}': {created} new permission(s)")
        return created

    # ────────────────────────────────
    # Reads
    # ────────────────────────────────
    async def list_permissions(self) -> List[Permission]:
        """Active permissions ordered by resource, then action."""
        return await permission_repository.list_active(self.db)

    async def paginate_permissions(self, params: Params) -> Any:
        """Active permissions, paginated."""
        try:
            stmt = (
                select(Permission)
                .where(Permission.is_active == true())
                .order_by(Permission.resource, Permission.action)
            )
            return await apaginate(self.db, stmt, params=params)
        except SQLAlchemyError as e:
            logger.exception(f"Error listing permissions: {str(e)}")
            raise DatabaseOperationException(message="Error listing permissions", original_error=e)

    async def list_permissions_by_resource(self, resource: Resource) -> List[Permission]:
        return await permission_repository.list_active(self.db, resource=resource)

    async def list_permissions_by_action(self, action: Action) -> List[Permission]:
        return await permission_repository.list_active(self.db, action=action)

    async def get_permission_by_name(self, name: str) -> Optional[Permission]:
        return await permission_repository.get_active_by_name(self.db, name)

    async def permission_exists(self, name: str) -> bool:
        return await permission_repository.exists(self.db, name=name, is_active=True)
