# workspace_rbac/adapters/inbound/api/v1/endpoints/workspace_endpoint.py

import logging
from typing import Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.inbound.api.deps import get_acting_user, get_current_user, get_session
from workspace_rbac.adapters.inbound.api.v1.dependencies.permission_deps import require_workspace_permission
from workspace_rbac.adapters.outbound.persistence.models import User
from workspace_rbac.application.dtos.workspace_dto import (
    MemberAdd,
    MembershipOutput,
    MemberUpdate,
    UserWorkspaceOutput,
    WorkspaceCreate,
    WorkspaceMemberOutput,
    WorkspaceOutput,
)
from workspace_rbac.application.use_cases.workspace_use_cases import AsyncWorkspaceService
from workspace_rbac.domain.models.permission import Action, Resource

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workspaces", tags=["Workspaces"])


@router.post(
    "",
    response_model=WorkspaceOutput,
    status_code=status.HTTP_201_CREATED,
    summary="Create Workspace",
    description="Create a workspace; the caller becomes OWNER and receives every catalog permission."
)
async def create_workspace(
        data: WorkspaceCreate,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
        current_user: User = Depends(get_current_user),
):
    return await AsyncWorkspaceService(db).create_workspace(
        data.name, data.description, created_by=acting_user.id, recorded_by=current_user.id
    )


@router.get(
    "/mine",
    response_model=List[UserWorkspaceOutput],
    summary="List My Workspaces",
)
async def list_my_workspaces(
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
):
    return await AsyncWorkspaceService(db).get_user_workspaces(acting_user.id)


@router.get(
    "/{workspace_id}",
    response_model=WorkspaceOutput,
    summary="Get Workspace",
)
async def get_workspace(
        workspace_id: UUID,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(require_workspace_permission(Resource.WORKSPACE, Action.VIEW)),
):
    return await AsyncWorkspaceService(db).get_workspace(workspace_id)


# ────────────────────────────────
# Members
# ────────────────────────────────
@router.post(
    "/{workspace_id}/members",
    response_model=MembershipOutput,
    status_code=status.HTTP_201_CREATED,
    summary="Add Member",
)
async def add_member(
        workspace_id: UUID,
        data: MemberAdd,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
        current_user: User = Depends(get_current_user),
):
    return await AsyncWorkspaceService(db).add_user_to_workspace(
        workspace_id, data.user_id, data.access_level, added_by=acting_user.id, recorded_by=current_user.id
    )


@router.get(
    "/{workspace_id}/members",
    response_model=List[WorkspaceMemberOutput],
    summary="List Members",
)
async def list_members(
        workspace_id: UUID,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(require_workspace_permission(Resource.WORKSPACE, Action.VIEW)),
):
    return await AsyncWorkspaceService(db).get_workspace_users(workspace_id)


@router.patch(
    "/{workspace_id}/members/{user_id}",
    response_model=MembershipOutput,
    summary="Update Member Access Level",
)
async def update_member(
        workspace_id: UUID,
        user_id: UUID,
        data: MemberUpdate,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
        current_user: User = Depends(get_current_user),
):
    return await AsyncWorkspaceService(db).update_user_access_level(
        workspace_id, user_id, data.access_level, updated_by=acting_user.id, recorded_by=current_user.id
    )


@router.delete(
    "/{workspace_id}/members/{user_id}",
    summary="Remove Member",
)
async def remove_member(
        workspace_id: UUID,
        user_id: UUID,
        db: AsyncSession = Depends(get_session),
        acting_user: User = Depends(get_acting_user),
        current_user: User = Depends(get_current_user),
) -> Dict[str, bool]:
    removed = await AsyncWorkspaceService(db).remove_user_from_workspace(
        workspace_id, user_id, removed_by=acting_user.id, recorded_by=current_user.id
    )
    return {"removed": removed}
