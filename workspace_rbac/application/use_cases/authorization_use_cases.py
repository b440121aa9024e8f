# workspace_rbac/application/use_cases/authorization_use_cases.py

"""
Authorization evaluator.

Answers "may user U perform action A on resource R in workspace W?" by
plain set membership on the user's grant record. No inheritance, no
wildcards: workspace.delete does not imply workspace.view.

Capabilities (such as impersonation) are answered by looking for the
permission in any of the user's workspaces.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.application.use_cases.user_workspace_permission_use_cases import (
    AsyncUserWorkspacePermissionService,
)
from workspace_rbac.domain.exceptions import PermissionDeniedException
from workspace_rbac.domain.models.permission import Action, Resource, get_permission_name

logger = logging.getLogger(__name__)

IMPERSONATION_CAPABILITY = (Resource.USER, Action.IMPERSONATE)


class AsyncAuthorizationEvaluator:

    def __init__(self, db_session: AsyncSession, grant_service: Optional[AsyncUserWorkspacePermissionService] = None):
        self.db = db_session
        self.grants = grant_service or AsyncUserWorkspacePermissionService(db_session)

    async def is_allowed(self, user_id: UUID, workspace_id: UUID, resource: Resource, action: Action) -> bool:
        return await self.grants.user_has_permission(user_id, workspace_id, resource, action)

    async def has_capability(self, user_id: UUID, resource: Resource, action: Action) -> bool:
        return await self.grants.user_has_permission_in_any_workspace(user_id, resource, action)

    async def has_workspace_access(self, user_id: UUID, workspace_id: UUID) -> bool:
        return await self.grants.user_has_workspace_access(user_id, workspace_id)

    async def authorize(self, user_id: UUID, workspace_id: UUID, resource: Resource, action: Action) -> None:
        """
        Raises:
            PermissionDeniedException: when the user lacks the permission in the workspace
        """
        if not await self.is_allowed(user_id, workspace_id, resource, action):
            name = get_permission_name(resource, action)
            logger.warning(f"User {user_id} denied '{name}' in workspace {workspace_id}")
            raise PermissionDeniedException(f"Permission '{name}' denied in this workspace")

    async def authorize_capability(self, user_id: UUID, resource: Resource, action: Action) -> None:
        if not await self.has_capability(user_id, resource, action):
            name = get_permission_name(resource, action)
            logger.warning(f"User {user_id} lacks capability '{name}'")
            raise PermissionDeniedException(f"Permission '{name}' denied")
