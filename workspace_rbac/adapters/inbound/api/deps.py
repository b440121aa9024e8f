# workspace_rbac/adapters/inbound/api/deps.py

"""
Dependencies for injection into API endpoints.

This module defines functions that provide dependencies via
FastAPI Depends() for authentication and database access.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.outbound.persistence.database import get_db
from workspace_rbac.adapters.outbound.persistence.models import User
from workspace_rbac.adapters.outbound.persistence.repositories.impersonation_session_repository import (
    impersonation_session_repository,
)
from workspace_rbac.adapters.outbound.persistence.repositories.user_repository import user_repository
from workspace_rbac.adapters.outbound.security.token_manager import InvalidTokenError, TokenManager
from workspace_rbac.shared.utils.datetime_utils import DateTimeUtil

# Configure logger
logger = logging.getLogger(__name__)

# Create bearer scheme for authentication
bearer_scheme = HTTPBearer(auto_error=False)


########################################################################
# Database Session Management
########################################################################

get_session = get_db


########################################################################
# User Token Authentication
########################################################################


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    Get the authenticated (real) user from the bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid, or the user doesn't exist/is inactive
    """
    if credentials is None:
        raise _unauthorized("Not authenticated.")

    try:
        user_id = TokenManager.decode_subject(credentials.credentials)
    except InvalidTokenError:
        raise _unauthorized("Invalid authentication credentials.")

    user = await user_repository.get(db, user_id)
    if not user:
        logger.warning(f"Token subject {user_id} does not match any user")
        raise _unauthorized("User not found.")

    if not user.is_active:
        logger.warning(f"Inactive user {user_id} attempted to authenticate")
        raise _unauthorized("Inactive user.")

    return user


async def get_acting_user(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    Identity used for authorization checks.

    When the authenticated user has an ACTIVE, not overdue impersonation
    session, the impersonated user is returned; otherwise the authenticated
    user. The real identity stays available through get_current_user.
    """
    session = await impersonation_session_repository.get_active_for_impersonator(db, current_user.id)
    if session is None:
        return current_user

    if session.expires_at is not None and DateTimeUtil.is_past(session.expires_at):
        logger.info(f"Impersonation session {session.id} is overdue; acting as {current_user.id}")
        return current_user

    impersonated = await user_repository.get(db, session.impersonated_user_id)
    if not impersonated or not impersonated.is_active:
        logger.warning(f"Impersonated user {session.impersonated_user_id} unavailable; ignoring session {session.id}")
        return current_user

    logger.debug(f"User {current_user.id} acting as {impersonated.id} (session {session.id})")
    return impersonated
