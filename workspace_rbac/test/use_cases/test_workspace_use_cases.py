# workspace_rbac/test/use_cases/test_workspace_use_cases.py

# Para Rodar o Script:
# pytest workspace_rbac/test/use_cases/test_workspace_use_cases.py -v

from uuid import UUID, uuid4

import pytest
from sqlalchemy import func, select

from workspace_rbac.adapters.outbound.persistence.models import UserWorkspace, Workspace
from workspace_rbac.application.ports.outbound import PermissionAssignmentPolicy
from workspace_rbac.application.use_cases.authorization_use_cases import AsyncAuthorizationEvaluator
from workspace_rbac.application.use_cases.user_workspace_permission_use_cases import (
    AsyncUserWorkspacePermissionService,
)
from workspace_rbac.application.use_cases.workspace_use_cases import AsyncWorkspaceService
from workspace_rbac.domain.exceptions import (
    PermissionDeniedException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
)
from workspace_rbac.domain.models.permission import Action, Resource
from workspace_rbac.domain.models.workspace import WorkspaceAccessLevel


class DenyAllAssignmentPolicy(PermissionAssignmentPolicy):

    async def can_assign(self, db, actor_id: UUID, workspace_id: UUID) -> bool:
        return False


@pytest.mark.asyncio
async def test_create_workspace_bootstrap(db_session, create_user):
    creator = await create_user()
    service = AsyncWorkspaceService(db_session)

    workspace = await service.create_workspace("Acme", "Main tenant", creator.id)

    assert workspace.owner_id == creator.id
    membership = await db_session.scalar(
        select(UserWorkspace).where(UserWorkspace.workspace_id == workspace.id, UserWorkspace.user_id == creator.id)
    )
    assert membership.access_level == WorkspaceAccessLevel.OWNER

    permissions = await AsyncUserWorkspacePermissionService(db_session).get_user_workspace_permissions(
        creator.id, workspace.id
    )
    assert len(permissions) == 43

    evaluator = AsyncAuthorizationEvaluator(db_session)
    assert await evaluator.is_allowed(creator.id, workspace.id, Resource.DESIGNER, Action.UPLOAD)
    assert await evaluator.has_capability(creator.id, Resource.USER, Action.IMPERSONATE)


@pytest.mark.asyncio
async def test_create_workspace_unknown_creator(db_session):
    with pytest.raises(ResourceNotFoundException):
        await AsyncWorkspaceService(db_session).create_workspace("Ghost", None, uuid4())


@pytest.mark.asyncio
async def test_create_workspace_rolls_back_on_failure(db_session, create_user):
    creator = await create_user()
    service = AsyncWorkspaceService(db_session, assignment_policy=DenyAllAssignmentPolicy())

    with pytest.raises(PermissionDeniedException):
        await service.create_workspace("Broken", None, creator.id)

    assert await db_session.scalar(select(func.count()).select_from(Workspace)) == 0
    assert await db_session.scalar(select(func.count()).select_from(UserWorkspace)) == 0


@pytest.mark.asyncio
async def test_user_workspaces(db_session, create_user):
    creator = await create_user()
    service = AsyncWorkspaceService(db_session)
    first = await service.create_workspace("First", None, creator.id)
    await service.create_workspace("Second", None, creator.id)

    entries = await service.get_user_workspaces(creator.id)
    assert {e["workspace"].name for e in entries} == {"First", "Second"}
    assert all(e["access_level"] == WorkspaceAccessLevel.OWNER for e in entries)
    assert (await service.get_workspace(first.id)).name == "First"


@pytest.mark.asyncio
async def test_membership_lifecycle(db_session, create_user):
    creator = await create_user()
    member = await create_user()
    service = AsyncWorkspaceService(db_session)
    workspace = await service.create_workspace("Team", None, creator.id)

    await service.add_user_to_workspace(workspace.id, member.id, WorkspaceAccessLevel.VIEWER, creator.id)
    with pytest.raises(ResourceAlreadyExistsException):
        await service.add_user_to_workspace(workspace.id, member.id, WorkspaceAccessLevel.VIEWER, creator.id)

    # members cannot manage members unless elevated
    with pytest.raises(PermissionDeniedException):
        await service.add_user_to_workspace(workspace.id, (await create_user()).id, "viewer", member.id)

    updated = await service.update_user_access_level(workspace.id, member.id, WorkspaceAccessLevel.ADMIN, creator.id)
    assert updated.access_level == WorkspaceAccessLevel.ADMIN

    users = await service.get_workspace_users(workspace.id)
    assert {(u["user"].id, u["access_level"]) for u in users} == {
        (creator.id, WorkspaceAccessLevel.OWNER),
        (member.id, WorkspaceAccessLevel.ADMIN),
    }

    # membership does not carry grants
    assert not await AsyncAuthorizationEvaluator(db_session).has_workspace_access(member.id, workspace.id)

    assert await service.remove_user_from_workspace(workspace.id, member.id, creator.id)
    assert not await service.remove_user_from_workspace(workspace.id, member.id, creator.id)
    with pytest.raises(ResourceNotFoundException):
        await service.update_user_access_level(workspace.id, member.id, WorkspaceAccessLevel.VIEWER, creator.id)


@pytest.mark.asyncio
async def test_membership_unknown_targets(db_session, create_user):
    creator = await create_user()
    service = AsyncWorkspaceService(db_session)
    workspace = await service.create_workspace("Team", None, creator.id)

    with pytest.raises(ResourceNotFoundException):
        await service.add_user_to_workspace(uuid4(), creator.id, WorkspaceAccessLevel.VIEWER, creator.id)
    with pytest.raises(ResourceNotFoundException):
        await service.add_user_to_workspace(workspace.id, uuid4(), WorkspaceAccessLevel.VIEWER, creator.id)
