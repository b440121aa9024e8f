# workspace_rbac/application/use_cases/workspace_use_cases.py

"""
Service for workspaces and memberships.

create_workspace bootstraps a tenant: the permission catalog is seeded, the
workspace and the creator's OWNER membership are inserted, and the creator
receives every catalog permission. The last three steps share one
transaction, so a failure leaves nothing behind and the call can simply be
repeated.

Memberships (UserWorkspace) are independent from permission grants; none of
the membership operations touches a grant record.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.outbound.persistence.models import UserWorkspace, Workspace
from workspace_rbac.adapters.outbound.persistence.repositories.user_repository import user_repository
from workspace_rbac.adapters.outbound.persistence.repositories.workspace_repository import (
    user_workspace_repository,
    workspace_repository,
)
from workspace_rbac.adapters.outbound.security.permissions import default_assignment_policy
from workspace_rbac.application.ports.outbound import PermissionAssignmentPolicy
from workspace_rbac.application.use_cases.permission_catalog_use_cases import AsyncPermissionCatalogService
from workspace_rbac.application.use_cases.user_workspace_permission_use_cases import (
    AsyncUserWorkspacePermissionService,
)
from workspace_rbac.domain.exceptions import (
    DatabaseOperationException,
    DomainException,
    PermissionDeniedException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
)
from workspace_rbac.domain.models.workspace import WorkspaceAccessLevel
from workspace_rbac.domain.services.permission_generator import iter_valid_combinations
from workspace_rbac.shared.utils.datetime_utils import DateTimeUtil

logger = logging.getLogger(__name__)


class AsyncWorkspaceService:
    """Service layer for workspace bootstrap and membership management."""

    def __init__(self, db_session: AsyncSession, assignment_policy: Optional[PermissionAssignmentPolicy] = None):
        self.db = db_session
        self.assignment_policy = assignment_policy or default_assignment_policy
        self.catalog = AsyncPermissionCatalogService(db_session)
        self.grants = AsyncUserWorkspacePermissionService(db_session, assignment_policy=self.assignment_policy)

    # ────────────────────────────────
    # Helpers
    # ────────────────────────────────
    async def _get_active_workspace(self, workspace_id: UUID) -> Workspace:
        workspace = await workspace_repository.get(self.db, workspace_id)
        if not workspace or not workspace.is_active:
            logger.warning(f"Workspace not found: {workspace_id}")
            raise ResourceNotFoundException(message="Workspace not found", resource_id=workspace_id)
        return workspace

    async def _ensure_can_manage(self, actor_id: UUID, workspace_id: UUID) -> None:
        if not await self.assignment_policy.can_assign(self.db, actor_id, workspace_id):
            logger.warning(f"User {actor_id} is not allowed to manage members of workspace {workspace_id}")
            raise PermissionDeniedException("You don't have permission to manage members of this workspace")

    # ────────────────────────────────
    # Bootstrap
    # ────────────────────────────────
    async def create_workspace(self, name: str, description: Optional[str], created_by: UUID,
                               recorded_by: Optional[UUID] = None) -> Workspace:
        """
        Create a workspace owned by created_by with the full permission set.

        recorded_by (default created_by) fills the audit columns, so a
        workspace created under impersonation is owned by the impersonated
        user but attributed to the real one.

        Raises:
            ResourceNotFoundException: created_by does not exist
            DatabaseOperationException: storage failure (nothing is persisted)
        """
        creator = await user_repository.get(self.db, created_by)
        if not creator or not creator.is_active:
            logger.warning(f"Workspace creator not found or inactive: {created_by}")
            raise ResourceNotFoundException(message="User not found", resource_id=created_by)

        recorded_by = recorded_by or created_by
        await self.catalog.seed_all_permissions()

        try:
            workspace = await workspace_repository.create(
                self.db,
                obj_in={
                    "name": name,
                    "description": description,
                    "owner_id": created_by,
                    "is_active": True,
                    "created_by": recorded_by,
                    "updated_by": recorded_by,
                },
                commit=False,
            )
            await user_workspace_repository.create(
                self.db,
                obj_in={
                    "user_id": created_by,
                    "workspace_id": workspace.id,
                    "access_level": WorkspaceAccessLevel.OWNER,
                    "is_active": True,
                    "created_by": recorded_by,
                    "updated_by": recorded_by,
                },
                commit=False,
            )
            await self.grants.assign_multiple_permissions(
                user_id=created_by,
                workspace_id=workspace.id,
                permissions=list(iter_valid_combinations()),
                assigned_by=created_by,
                recorded_by=recorded_by,
                commit=False,
            )
            await self.db.commit()

        except DomainException:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error creating workspace '{name}': {str(e)}")
            raise DatabaseOperationException(message="Error creating workspace", original_error=e)

        logger.info(f"Workspace {workspace.id} ('{name}') created by {created_by}")
        return workspace

    # ────────────────────────────────
    # Workspace queries
    # ────────────────────────────────
    async def get_workspace(self, workspace_id: UUID) -> Workspace:
        return await self._get_active_workspace(workspace_id)

    async def get_user_workspaces(self, user_id: UUID) -> List[Dict[str, Any]]:
        """Workspaces where the user is an active member, with the access level."""
        memberships = await workspace_repository.list_user_memberships(self.db, user_id)
        workspaces = {
            w.id: w for w in await workspace_repository.get_many(self.db, [m.workspace_id for m in memberships])
        }
        return [
            {"workspace": workspaces[m.workspace_id], "access_level": m.access_level}
            for m in memberships
            if m.workspace_id in workspaces and workspaces[m.workspace_id].is_active
        ]

    # ────────────────────────────────
    # Membership
    # ────────────────────────────────
    async def add_user_to_workspace(
            self,
            workspace_id: UUID,
            user_id: UUID,
            access_level: WorkspaceAccessLevel,
            added_by: UUID,
            recorded_by: Optional[UUID] = None,
    ) -> UserWorkspace:
        """
        Raises:
            ResourceNotFoundException: workspace or user missing
            ResourceAlreadyExistsException: user is already an active member
        """
        await self._get_active_workspace(workspace_id)
        await self._ensure_can_manage(added_by, workspace_id)

        user = await user_repository.get(self.db, user_id)
        if not user:
            logger.warning(f"User not found: {user_id}")
            raise ResourceNotFoundException(message="User not found", resource_id=user_id)

        if await workspace_repository.get_membership(self.db, user_id, workspace_id):
            logger.warning(f"User {user_id} is already a member of workspace {workspace_id}")
            raise ResourceAlreadyExistsException(message="User is already a member of this workspace")

        membership = await user_workspace_repository.create(
            self.db,
            obj_in={
                "user_id": user_id,
                "workspace_id": workspace_id,
                "access_level": WorkspaceAccessLevel(access_level),
                "is_active": True,
                "created_by": recorded_by or added_by,
                "updated_by": recorded_by or added_by,
            },
        )
        logger.info(f"User {user_id} added to workspace {workspace_id} as {membership.access_level.value}")
        return membership

    async def remove_user_from_workspace(self, workspace_id: UUID, user_id: UUID, removed_by: UUID,
                                         recorded_by: Optional[UUID] = None) -> bool:
        """Deactivate the membership. Returns False when the user was not a member."""
        await self._ensure_can_manage(removed_by, workspace_id)

        membership = await workspace_repository.get_membership(self.db, user_id, workspace_id)
        if not membership:
            return False

        await user_workspace_repository.update(
            self.db,
            db_obj=membership,
            obj_in={
                "is_active": False,
                "deleted_at": DateTimeUtil.for_storage(),
                "updated_by": recorded_by or removed_by,
            },
        )

        logger.info(f"User {user_id} removed from workspace {workspace_id}")
        return True

    async def get_workspace_users(self, workspace_id: UUID) -> List[Dict[str, Any]]:
        """Active members of the workspace, with their access level."""
        await self._get_active_workspace(workspace_id)
        memberships = await workspace_repository.list_workspace_memberships(self.db, workspace_id)
        users = {u.id: u for u in await user_repository.get_many(self.db, [m.user_id for m in memberships])}
        return [
            {"user": users[m.user_id], "access_level": m.access_level}
            for m in memberships
            if m.user_id in users
        ]

    async def update_user_access_level(
            self,
            workspace_id: UUID,
            user_id: UUID,
            access_level: WorkspaceAccessLevel,
            updated_by: UUID,
            recorded_by: Optional[UUID] = None,
    ) -> UserWorkspace:
        """
        Raises:
            ResourceNotFoundException: user is not an active member
        """
        await self._ensure_can_manage(updated_by, workspace_id)

        membership = await workspace_repository.get_membership(self.db, user_id, workspace_id)
        if not membership:
            logger.warning(f"User {user_id} is not a member of workspace {workspace_id}")
            raise ResourceNotFoundException(message="User is not a member of this workspace", resource_id=user_id)

        membership = await user_workspace_repository.update(
            self.db,
            db_obj=membership,
            obj_in={"access_level": WorkspaceAccessLevel(access_level), "updated_by": recorded_by or updated_by},
        )

        logger.info(f"User {user_id} access level in workspace {workspace_id} set to {membership.access_level.value}")
        return membership
