# workspace_rbac/test/routes/test_permission_routes.py

# Para Rodar o Script:
# pytest workspace_rbac/test/routes/test_permission_routes.py -v

import pytest


@pytest.mark.asyncio
async def test_health(async_client):
    response = await async_client.get("/")
    assert response.status_code == 200
    assert response.json()["name"]


@pytest.mark.asyncio
async def test_requires_token(async_client):
    response = await async_client.get("/api/v1/permissions")
    assert response.status_code == 401

    response = await async_client.get("/api/v1/permissions", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_seed_requires_superuser(async_client, create_user, make_headers):
    user = await create_user()
    admin = await create_user(is_superuser=True)

    response = await async_client.post("/api/v1/permissions/seed", headers=make_headers(user))
    assert response.status_code == 403

    response = await async_client.post("/api/v1/permissions/seed", headers=make_headers(admin))
    assert response.status_code == 200
    assert response.json() == {"created": 43}

    response = await async_client.post("/api/v1/permissions/seed", headers=make_headers(admin))
    assert response.json() == {"created": 0}


@pytest.mark.asyncio
async def test_seed_unknown_resource(async_client, create_user, make_headers):
    admin = await create_user(is_superuser=True)

    response = await async_client.post("/api/v1/permissions/seed/spaceship", headers=make_headers(admin))

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "INVALID_OPERATION"
    assert "designer" in body["details"]["valid_resources"]


@pytest.mark.asyncio
async def test_list_is_paginated(async_client, seeded_catalog, create_user, make_headers):
    user = await create_user()

    response = await async_client.get("/api/v1/permissions?page=2&size=10", headers=make_headers(user))

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 43
    assert body["page"] == 2
    assert len(body["items"]) == 10


@pytest.mark.asyncio
async def test_list_by_resource(async_client, seeded_catalog, create_user, make_headers):
    user = await create_user()

    response = await async_client.get("/api/v1/permissions/resource/designer", headers=make_headers(user))

    assert response.status_code == 200
    assert {p["action"] for p in response.json()} >= {"upload", "view"}
