# workspace_rbac/test/integration/test_concurrent_grants.py

# Para Rodar o Script:
# pytest workspace_rbac/test/integration/test_concurrent_grants.py -v

"""
Concurrent writers on a file-backed SQLite database, each with its own
connection. Without the atomic read-modify-write one of two simultaneous
assignments would be lost.
"""

import asyncio
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from workspace_rbac.adapters.outbound.persistence.models import Base, User, UserWorkspacePermission
from workspace_rbac.adapters.outbound.security.permissions import AllowAllAssignmentPolicy
from workspace_rbac.application.use_cases.permission_catalog_use_cases import AsyncPermissionCatalogService
from workspace_rbac.application.use_cases.user_workspace_permission_use_cases import (
    AsyncUserWorkspacePermissionService,
)
from workspace_rbac.application.use_cases.workspace_use_cases import AsyncWorkspaceService
from workspace_rbac.domain.models.permission import Action, Resource


@pytest_asyncio.fixture
async def file_sessions(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'rbac.db'}", connect_args={"timeout": 30})
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)
    await engine.dispose()


@pytest.mark.asyncio
async def test_parallel_assignments_are_not_lost(file_sessions):
    async with file_sessions() as db:
        owner = User(id=uuid4(), email="owner@example.com", first_name="O", last_name="W")
        member = User(id=uuid4(), email="member@example.com", first_name="M", last_name="B")
        db.add_all([owner, member])
        await db.commit()
        await AsyncPermissionCatalogService(db).seed_all_permissions()
        workspace = await AsyncWorkspaceService(db, assignment_policy=AllowAllAssignmentPolicy()).create_workspace(
            "Race", None, owner.id
        )

    pairs = [
        (Resource.CAMPAIGN, Action.VIEW),
        (Resource.CAMPAIGN, Action.UPDATE),
        (Resource.AGENCY, Action.VIEW),
        (Resource.DESIGNER, Action.UPLOAD),
    ]

    async def assign(resource, action):
        async with file_sessions() as session:
            service = AsyncUserWorkspacePermissionService(session, max_retries=10)
            await service.assign_permission(member.id, workspace.id, resource, action, owner.id)

    await asyncio.gather(*(assign(r, a) for r, a in pairs))

    async with file_sessions() as db:
        records = (await db.execute(
            select(UserWorkspacePermission).where(
                UserWorkspacePermission.user_id == member.id,
                UserWorkspacePermission.workspace_id == workspace.id,
            )
        )).scalars().all()
        assert len(records) == 1
        assert records[0].is_active
        assert len(records[0].permission_ids) == len(pairs)
