# workspace_rbac/adapters/inbound/api/v1/dependencies/permission_deps.py

"""
Permission dependencies for API endpoints.

Workspace-scoped checks resolve the workspace id from the request, in this
order: the ``workspace_id`` path parameter, the ``workspace_id`` query
parameter, the ``X-Workspace-Id`` header.
"""

import logging
from typing import Callable, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.inbound.api.deps import get_acting_user, get_current_user, get_session
from workspace_rbac.adapters.outbound.persistence.models import User
from workspace_rbac.application.use_cases.authorization_use_cases import AsyncAuthorizationEvaluator
from workspace_rbac.domain.models.permission import Action, Resource

logger = logging.getLogger(__name__)

WORKSPACE_HEADER = "x-workspace-id"


def resolve_workspace_id(request: Request) -> Optional[UUID]:
    """
    Extract the workspace id from path, query or header.

    Raises:
        HTTPException: 400 if a value is present but is not a UUID
    """
    raw = (
        request.path_params.get("workspace_id")
        or request.query_params.get("workspace_id")
        or request.headers.get(WORKSPACE_HEADER)
    )
    if raw is None or raw == "":
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid workspace id")


def require_workspace_permission(resource: Resource, action: Action) -> Callable:
    """
    Dependency that requires `resource.action` in the request's workspace.

    Uso:
        @router.get(..., dependencies=[Depends(require_workspace_permission(Resource.CAMPAIGN, Action.VIEW))])
    """

    async def checker(
            request: Request,
            acting_user: User = Depends(get_acting_user),
            db: AsyncSession = Depends(get_session),
    ) -> User:
        workspace_id = resolve_workspace_id(request)
        if workspace_id is None:
            logger.warning(f"Workspace id missing for {request.method} {request.url.path}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Workspace ID is required")

        await AsyncAuthorizationEvaluator(db).authorize(acting_user.id, workspace_id, resource, action)
        return acting_user

    return checker


def require_capability(resource: Resource, action: Action) -> Callable:
    """Dependency that requires `resource.action` in any workspace of the acting user."""

    async def checker(
            acting_user: User = Depends(get_acting_user),
            db: AsyncSession = Depends(get_session),
    ) -> User:
        await AsyncAuthorizationEvaluator(db).authorize_capability(acting_user.id, resource, action)
        return acting_user

    return checker


def require_real_user_capability(resource: Resource, action: Action) -> Callable:
    """Like require_capability, evaluated on the authenticated user even while impersonating."""

    async def checker(
            current_user: User = Depends(get_current_user),
            db: AsyncSession = Depends(get_session),
    ) -> User:
        await AsyncAuthorizationEvaluator(db).authorize_capability(current_user.id, resource, action)
        return current_user

    return checker


def require_superuser(current_user: User = Depends(get_current_user)) -> User:
    """
    Require that the authenticated user is a superuser.

    Raises:
        HTTPException: If the user is not a superuser
    """
    if not current_user.is_superuser:
        logger.warning(f"Non-superuser {current_user.email} attempted to access superuser-only endpoint")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This action requires superuser privileges"
        )

    return current_user
