# workspace_rbac/adapters/inbound/api/v1/endpoints/user_workspace_permission_endpoint.py

"""
API endpoints for per-workspace permission grants.

Mutations are authorized by the assignment policy inside the service
(superuser, or OWNER/ADMIN of the target workspace). Under impersonation the
policy sees the impersonated user while the audit columns keep the real one.
"""

import logging
from typing import Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.inbound.api.deps import get_acting_user, get_current_user, get_session
from workspace_rbac.adapters.inbound.api.v1.dependencies.permission_deps import require_workspace_permission
from workspace_rbac.adapters.outbound.persistence.models import User
from workspace_rbac.application.dtos.permission_dto import (
    AssignMultiplePermissionsRequest,
    AssignPermissionRequest,
    BulkAssignRequest,
    PermissionCheckResult,
    PermissionOutput,
    UserWorkspacePermissionOutput,
    UserWorkspacePermissionsOutput,
    WorkspaceUserPermissionsOutput,
)
from workspace_rbac.application.use_cases.authorization_use_cases import AsyncAuthorizationEvaluator
from workspace_rbac.application.use_cases.user_workspace_permission_use_cases import (
    AsyncUserWorkspacePermissionService,
)
from workspace_rbac.domain.exceptions import PermissionDeniedException
from workspace_rbac.domain.models.permission import Action, Resource

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user-workspace-permissions", tags=["User Workspace Permissions"])


async def _ensure_self_or_allowed(db: AsyncSession, acting_user: User, user_id: UUID, workspace_id: UUID) -> None:
    """Users may read their own grants; reading others' needs user.view in the workspace."""
    if acting_user.id == user_id or acting_user.is_superuser:
        return
    await AsyncAuthorizationEvaluator(db).authorize(acting_user.id, workspace_id, Resource.USER, Action.VIEW)


# ────────────────────────────────
# Mutations
# ────────────────────────────────
@router.post(
    "/assign",
    response_model=UserWorkspacePermissionOutput,
    status_code=status.HTTP_201_CREATED,
    summary="Assign Permission",
    description="Add one permission to a user's set in a workspace. 409 if already assigned."
)
async def assign_permission(
        data: AssignPermissionRequest,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
        current_user: User = Depends(get_current_user),
):
    service = AsyncUserWorkspacePermissionService(db)
    return await service.assign_permission(
        data.user_id,
        data.workspace_id,
        data.resource,
        data.action,
        assigned_by=acting_user.id,
        recorded_by=current_user.id,
    )


@router.post(
    "/assign-multiple",
    response_model=UserWorkspacePermissionOutput,
    status_code=status.HTTP_201_CREATED,
    summary="Assign Multiple Permissions",
    description="Merge permissions into a user's set. Unknown pairs are ignored; idempotent."
)
async def assign_multiple_permissions(
        data: AssignMultiplePermissionsRequest,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
        current_user: User = Depends(get_current_user),
):
    service = AsyncUserWorkspacePermissionService(db)
    return await service.assign_multiple_permissions(
        data.user_id,
        data.workspace_id,
        [p.as_pair() for p in data.permissions],
        assigned_by=acting_user.id,
        recorded_by=current_user.id,
    )


@router.delete(
    "/remove/{user_id}/{workspace_id}",
    summary="Remove Permission",
    description="Remove one permission. Returns removed=false when there was nothing to remove."
)
async def remove_permission(
        user_id: UUID,
        workspace_id: UUID,
        resource: Resource = Query(..., description="Resource"),
        action: Action = Query(..., description="Action"),
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
        current_user: User = Depends(get_current_user),
) -> Dict[str, bool]:
    service = AsyncUserWorkspacePermissionService(db)
    removed = await service.remove_permission(
        user_id, workspace_id, resource, action, removed_by=acting_user.id, recorded_by=current_user.id
    )
    return {"removed": removed}


@router.delete(
    "/remove-all/{user_id}/{workspace_id}",
    summary="Remove All Permissions",
    description="Deactivate the user's grant record in the workspace."
)
async def remove_all_permissions(
        user_id: UUID,
        workspace_id: UUID,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
        current_user: User = Depends(get_current_user),
) -> Dict[str, bool]:
    service = AsyncUserWorkspacePermissionService(db)
    removed = await service.remove_all_user_workspace_permissions(
        user_id, workspace_id, removed_by=acting_user.id, recorded_by=current_user.id
    )
    return {"removed": removed}


@router.post(
    "/bulk-assign/{workspace_id}",
    response_model=List[UserWorkspacePermissionOutput],
    status_code=status.HTTP_201_CREATED,
    summary="Bulk Assign Permissions",
    description=(
        "Assign permission lists to several users. Each user is committed separately: "
        "the first failure stops the batch and users processed before it keep their grants."
    )
)
async def bulk_assign_permissions(
        workspace_id: UUID,
        data: BulkAssignRequest,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
        current_user: User = Depends(get_current_user),
):
    service = AsyncUserWorkspacePermissionService(db)
    return await service.bulk_assign_permissions(
        workspace_id,
        [(entry.user_id, [p.as_pair() for p in entry.permissions]) for entry in data.user_permissions],
        assigned_by=acting_user.id,
        recorded_by=current_user.id,
    )


# ────────────────────────────────
# Queries
# ────────────────────────────────
@router.get(
    "/user/{user_id}/workspace/{workspace_id}",
    response_model=List[PermissionOutput],
    summary="Get User Workspace Permissions",
)
async def get_user_workspace_permissions(
        user_id: UUID,
        workspace_id: UUID,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
):
    await _ensure_self_or_allowed(db, acting_user, user_id, workspace_id)
    return await AsyncUserWorkspacePermissionService(db).get_user_workspace_permissions(user_id, workspace_id)


@router.get(
    "/user/{user_id}/workspaces",
    response_model=List[UserWorkspacePermissionsOutput],
    summary="Get User Workspaces With Permissions",
)
async def get_user_workspaces_with_permissions(
        user_id: UUID,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
):
    if acting_user.id != user_id and not acting_user.is_superuser:
        logger.warning(f"User {acting_user.id} attempted to list workspaces of user {user_id}")
        raise PermissionDeniedException("You can only list your own workspaces")
    return await AsyncUserWorkspacePermissionService(db).get_user_workspaces_with_permissions(user_id)


@router.get(
    "/workspace/{workspace_id}/users",
    response_model=List[WorkspaceUserPermissionsOutput],
    summary="Get Workspace Users With Permissions",
)
async def get_workspace_users_with_permissions(
        workspace_id: UUID,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(require_workspace_permission(Resource.USER, Action.VIEW)),
):
    return await AsyncUserWorkspacePermissionService(db).get_workspace_users_with_permissions(workspace_id)


@router.get(
    "/check/{user_id}/{workspace_id}",
    response_model=PermissionCheckResult,
    summary="Check Permission",
)
async def check_permission(
        user_id: UUID,
        workspace_id: UUID,
        resource: Resource = Query(..., description="Resource"),
        action: Action = Query(..., description="Action"),
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
):
    await _ensure_self_or_allowed(db, acting_user, user_id, workspace_id)
    allowed = await AsyncAuthorizationEvaluator(db).is_allowed(user_id, workspace_id, resource, action)
    return PermissionCheckResult(
        allowed=allowed,
        details={"resource": resource.value, "action": action.value},
    )


@router.get(
    "/check-workspace-access/{user_id}/{workspace_id}",
    response_model=PermissionCheckResult,
    summary="Check Workspace Access",
)
async def check_workspace_access(
        user_id: UUID,
        workspace_id: UUID,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
):
    await _ensure_self_or_allowed(db, acting_user, user_id, workspace_id)
    allowed = await AsyncAuthorizationEvaluator(db).has_workspace_access(user_id, workspace_id)
    return PermissionCheckResult(allowed=allowed)
