# workspace_rbac/test/routes/test_impersonation_routes.py

# Para Rodar o Script:
# pytest workspace_rbac/test/routes/test_impersonation_routes.py -v

from uuid import UUID

import pytest
from sqlalchemy import select

from workspace_rbac.adapters.outbound.persistence.models import UserWorkspace, UserWorkspacePermission, Workspace


@pytest.mark.asyncio
async def test_impersonation_flow(async_client, create_user, make_headers):
    admin = await create_user()
    target = await create_user()
    headers = make_headers(admin)

    # bootstrap gives the creator user.impersonate
    response = await async_client.post("/api/v1/workspaces", json={"name": "Support"}, headers=headers)
    workspace_id = response.json()["id"]

    response = await async_client.post("/api/v1/impersonation/check-permissions", headers=headers)
    assert response.json() == {"can_impersonate": True}

    response = await async_client.post(
        "/api/v1/impersonation/start",
        json={"impersonated_user_id": str(target.id), "reason": "ticket #42"},
        headers={**headers, "User-Agent": "pytest"},
    )
    assert response.status_code == 201
    session = response.json()
    assert session["status"] == "active"
    assert session["metadata"]["user_agent"] == "pytest"

    # while the session is active the admin acts as the target
    response = await async_client.get(f"/api/v1/workspaces/{workspace_id}", headers=headers)
    assert response.status_code == 403

    response = await async_client.get("/api/v1/impersonation/context", headers=headers)
    assert response.json()["impersonated_user"]["id"] == str(target.id)

    response = await async_client.post(
        "/api/v1/impersonation/start", json={"impersonated_user_id": str(target.id)}, headers=headers
    )
    assert response.status_code == 400

    response = await async_client.post(f"/api/v1/impersonation/stop/{session['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "ended"

    response = await async_client.get(f"/api/v1/workspaces/{workspace_id}", headers=headers)
    assert response.status_code == 200

    response = await async_client.get("/api/v1/impersonation/history", headers=headers)
    assert [s["id"] for s in response.json()] == [session["id"]]


@pytest.mark.asyncio
async def test_start_without_capability(async_client, create_user, make_headers):
    user = await create_user()
    target = await create_user()

    response = await async_client.post(
        "/api/v1/impersonation/start",
        json={"impersonated_user_id": str(target.id)},
        headers=make_headers(user),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "PERMISSION_DENIED"


@pytest.mark.asyncio
async def test_sweep_requires_superuser(async_client, create_user, make_headers):
    user = await create_user()
    admin = await create_user(is_superuser=True)

    response = await async_client.post("/api/v1/impersonation/admin/sweep", headers=make_headers(user))
    assert response.status_code == 403

    response = await async_client.post("/api/v1/impersonation/admin/sweep", headers=make_headers(admin))
    assert response.status_code == 200
    assert response.json() == {"expired": 0, "strategy": "overdue"}


@pytest.mark.asyncio
async def test_writes_under_impersonation_record_the_real_user(db_session, async_client, create_user, make_headers):
    admin = await create_user()
    target = await create_user()
    member = await create_user()
    admin_headers = make_headers(admin)

    await async_client.post("/api/v1/workspaces", json={"name": "Support"}, headers=admin_headers)
    response = await async_client.post("/api/v1/workspaces", json={"name": "Target"}, headers=make_headers(target))
    workspace_id = response.json()["id"]

    response = await async_client.post(
        "/api/v1/impersonation/start", json={"impersonated_user_id": str(target.id)}, headers=admin_headers
    )
    assert response.status_code == 201

    # a política avalia o alvo (OWNER do workspace); a auditoria guarda o admin
    response = await async_client.post(
        f"/api/v1/workspaces/{workspace_id}/members",
        json={"user_id": str(member.id), "access_level": "viewer"},
        headers=admin_headers,
    )
    assert response.status_code == 201

    response = await async_client.post(
        "/api/v1/user-workspace-permissions/assign",
        json={"user_id": str(member.id), "workspace_id": workspace_id, "resource": "campaign", "action": "view"},
        headers=admin_headers,
    )
    assert response.status_code == 201

    response = await async_client.post("/api/v1/workspaces", json={"name": "On behalf"}, headers=admin_headers)
    assert response.status_code == 201
    created = response.json()
    assert created["owner_id"] == str(target.id)

    membership = (await db_session.execute(
        select(UserWorkspace).where(UserWorkspace.user_id == member.id)
    )).scalar_one()
    assert membership.created_by == admin.id

    grant = (await db_session.execute(
        select(UserWorkspacePermission).where(UserWorkspacePermission.user_id == member.id)
    )).scalar_one()
    assert grant.created_by == admin.id
    assert grant.updated_by == admin.id

    workspace = await db_session.get(Workspace, UUID(created["id"]))
    assert workspace.owner_id == target.id
    assert workspace.created_by == admin.id
