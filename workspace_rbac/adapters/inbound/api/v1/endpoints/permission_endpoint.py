# workspace_rbac/adapters/inbound/api/v1/endpoints/permission_endpoint.py

"""
API endpoints for the permission catalog.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, status
from fastapi_pagination import Page, Params
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.inbound.api.deps import get_current_user, get_session
from workspace_rbac.adapters.inbound.api.v1.dependencies.permission_deps import require_superuser
from workspace_rbac.adapters.outbound.persistence.models import User
from workspace_rbac.application.dtos.permission_dto import PermissionOutput, SeedResult
from workspace_rbac.application.use_cases.permission_catalog_use_cases import AsyncPermissionCatalogService
from workspace_rbac.domain.models.permission import Action, Resource
from workspace_rbac.shared.utils.pagination import catalog_pagination_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/permissions", tags=["Permissions"])


@router.post(
    "/seed",
    response_model=SeedResult,
    status_code=status.HTTP_200_OK,
    summary="Seed Permission Catalog",
    description="Insert every missing permission of the catalog. Idempotent. Requires superuser."
)
async def seed_permissions(
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(require_superuser),
):
    created = await AsyncPermissionCatalogService(db).seed_all_permissions()
    return SeedResult(created=created)


@router.post(
    "/seed/{resource}",
    response_model=SeedResult,
    status_code=status.HTTP_200_OK,
    summary="Seed Resource Permissions",
    description="Insert the missing permissions of one resource. Requires superuser."
)
async def seed_resource_permissions(
        resource: str = Path(..., description="Resource to seed"),
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(require_superuser),
):
    created = await AsyncPermissionCatalogService(db).seed_resource_permissions(resource)
    return SeedResult(created=created)


@router.get(
    "",
    response_model=Page[PermissionOutput],
    status_code=status.HTTP_200_OK,
    summary="List Permissions",
    description="List active permissions ordered by resource and action, with pagination."
)
async def list_permissions(
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(get_current_user),
        params: Params = Depends(catalog_pagination_params),
):
    return await AsyncPermissionCatalogService(db).paginate_permissions(params)


@router.get(
    "/resource/{resource}",
    response_model=List[PermissionOutput],
    summary="List Permissions by Resource",
)
async def list_permissions_by_resource(
        resource: Resource,
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(get_current_user),
):
    return await AsyncPermissionCatalogService(db).list_permissions_by_resource(resource)


@router.get(
    "/action/{action}",
    response_model=List[PermissionOutput],
    summary="List Permissions by Action",
)
async def list_permissions_by_action(
        action: Action,
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(get_current_user),
):
    return await AsyncPermissionCatalogService(db).list_permissions_by_action(action)
