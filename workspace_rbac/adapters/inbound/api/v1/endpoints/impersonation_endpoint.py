# workspace_rbac/adapters/inbound/api/v1/endpoints/impersonation_endpoint.py

"""
API endpoints for impersonation sessions.

Every route here works on the authenticated (real) user, never on the
impersonated identity.
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.inbound.api.deps import get_current_user, get_session
from workspace_rbac.adapters.inbound.api.v1.dependencies.permission_deps import (
    require_real_user_capability,
    require_superuser,
)
from workspace_rbac.adapters.outbound.persistence.models import User
from workspace_rbac.application.dtos.impersonation_dto import (
    ImpersonationContextOutput,
    ImpersonationSessionOutput,
    StartImpersonationRequest,
    SweepResult,
)
from workspace_rbac.application.dtos.permission_dto import UserSummary
from workspace_rbac.application.use_cases.authorization_use_cases import IMPERSONATION_CAPABILITY
from workspace_rbac.application.use_cases.impersonation_use_cases import AsyncImpersonationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/impersonation", tags=["Impersonation"])


@router.post(
    "/start",
    response_model=ImpersonationSessionOutput,
    status_code=status.HTTP_201_CREATED,
    summary="Start Impersonation",
    description="Open an impersonation session. Requires user.impersonate in any workspace."
)
async def start_impersonation(
        data: StartImpersonationRequest,
        request: Request,
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(get_current_user),
):
    if data.ip_address is None and request.client:
        data.ip_address = request.client.host
    if data.user_agent is None:
        data.user_agent = request.headers.get("user-agent")
    return await AsyncImpersonationService(db).start_impersonation(current_user.id, data)


@router.post(
    "/stop/{session_id}",
    response_model=ImpersonationSessionOutput,
    summary="Stop Impersonation",
)
async def stop_impersonation(
        session_id: UUID,
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(get_current_user),
):
    return await AsyncImpersonationService(db).end_impersonation(session_id, ended_by=current_user.id)


@router.get(
    "/active",
    response_model=Optional[ImpersonationSessionOutput],
    summary="Get Active Session",
)
async def get_active_session(
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(get_current_user),
):
    return await AsyncImpersonationService(db).get_active_impersonation_session(current_user.id)


@router.get(
    "/context",
    response_model=Optional[ImpersonationContextOutput],
    summary="Get Impersonation Context",
)
async def get_context(
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(get_current_user),
):
    return await AsyncImpersonationService(db).get_impersonation_context(current_user.id)


@router.get(
    "/users",
    response_model=List[UserSummary],
    summary="List Impersonatable Users",
)
async def get_impersonatable_users(
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(require_real_user_capability(*IMPERSONATION_CAPABILITY)),
):
    return await AsyncImpersonationService(db).get_impersonatable_users(current_user.id)


@router.get(
    "/history",
    response_model=List[ImpersonationSessionOutput],
    summary="Impersonation History",
)
async def get_history(
        limit: Optional[int] = Query(None, ge=1, le=500, description="Maximum number of sessions"),
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(get_current_user),
):
    return await AsyncImpersonationService(db).get_impersonation_history(current_user.id, limit)


@router.get(
    "/admin/all-active",
    response_model=List[ImpersonationSessionOutput],
    summary="List All Active Sessions",
)
async def get_all_active_sessions(
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(require_real_user_capability(*IMPERSONATION_CAPABILITY)),
):
    return await AsyncImpersonationService(db).get_all_active_sessions()


@router.post(
    "/check-permissions",
    summary="Check Impersonation Capability",
)
async def check_permissions(
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(get_current_user),
) -> Dict[str, bool]:
    return {"can_impersonate": await AsyncImpersonationService(db).can_impersonate(current_user.id)}


@router.post(
    "/admin/sweep",
    response_model=SweepResult,
    summary="Expire Sessions",
    description="Run the configured sweep strategy over ACTIVE sessions. Requires superuser."
)
async def sweep_sessions(
        db: AsyncSession = Depends(get_session),
        current_user: User = Depends(require_superuser),
):
    service = AsyncImpersonationService(db)
    expired = await service.check_and_update_expired_sessions()
    return SweepResult(expired=expired, strategy=service.sweep_strategy.name)
