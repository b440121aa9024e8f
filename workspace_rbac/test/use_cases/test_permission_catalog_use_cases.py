# workspace_rbac/test/use_cases/test_permission_catalog_use_cases.py

# Para Rodar o Script:
# pytest workspace_rbac/test/use_cases/test_permission_catalog_use_cases.py -v

import pytest
from fastapi_pagination import Params

from workspace_rbac.application.use_cases.permission_catalog_use_cases import AsyncPermissionCatalogService
from workspace_rbac.domain.exceptions import InvalidOperationException
from workspace_rbac.domain.models.permission import Action, Resource


@pytest.mark.asyncio
async def test_seed_all_is_idempotent(db_session):
    service = AsyncPermissionCatalogService(db_session)

    assert await service.seed_all_permissions() == 43
    assert await service.seed_all_permissions() == 0
    assert len(await service.list_permissions()) == 43


@pytest.mark.asyncio
async def test_seed_resource_then_all(db_session):
    service = AsyncPermissionCatalogService(db_session)

    assert await service.seed_resource_permissions("designer") == 7
    assert await service.seed_resource_permissions(Resource.DESIGNER) == 0
    assert await service.seed_all_permissions() == 36


@pytest.mark.asyncio
async def test_seed_unknown_resource(db_session):
    service = AsyncPermissionCatalogService(db_session)
    with pytest.raises(InvalidOperationException) as exc:
        await service.seed_resource_permissions("spaceship")
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_catalog_reads(db_session, seeded_catalog):
    service = AsyncPermissionCatalogService(db_session)

    permissions = await service.list_permissions()
    keys = [(p.resource, p.action) for p in permissions]
    assert keys == sorted(keys)

    campaign = await service.list_permissions_by_resource(Resource.CAMPAIGN)
    assert {p.action for p in campaign} == {a.value for a in Action} - {"upload"}

    uploads = await service.list_permissions_by_action(Action.UPLOAD)
    assert [p.name for p in uploads] == ["designer.upload"]

    assert await service.permission_exists("user.impersonate")
    assert not await service.permission_exists("campaign.upload")


@pytest.mark.asyncio
async def test_inactive_permissions_are_hidden(db_session, seeded_catalog):
    service = AsyncPermissionCatalogService(db_session)
    permission = await service.get_permission_by_name("agency.delete")
    permission.is_active = False
    await db_session.commit()

    assert not await service.permission_exists("agency.delete")
    assert len(await service.list_permissions()) == 42
    # soft-deactivated rows still count as seeded
    assert await service.seed_all_permissions() == 0


@pytest.mark.asyncio
async def test_paginate_permissions(db_session, seeded_catalog):
    service = AsyncPermissionCatalogService(db_session)

    page = await service.paginate_permissions(Params(page=5, size=10))

    assert page.total == 43
    assert page.page == 5
    assert len(page.items) == 3
    keys = [(p.resource, p.action) for p in page.items]
    assert keys == sorted(keys)
