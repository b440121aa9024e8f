# workspace_rbac/application/use_cases/impersonation_use_cases.py

"""
Service for impersonation sessions.

A user holding user.impersonate in any workspace may act as another user
for the duration of a session. At most one ACTIVE session exists per
impersonator. Sessions are audit records and are never deleted; ENDED and
EXPIRED are terminal.
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.configuration.config import settings
from workspace_rbac.adapters.outbound.persistence.models import ImpersonationSession, User
from workspace_rbac.adapters.outbound.persistence.repositories.impersonation_session_repository import (
    impersonation_session_repository,
)
from workspace_rbac.adapters.outbound.persistence.repositories.user_repository import user_repository
from workspace_rbac.application.dtos.impersonation_dto import StartImpersonationRequest
from workspace_rbac.application.use_cases.authorization_use_cases import (
    IMPERSONATION_CAPABILITY,
    AsyncAuthorizationEvaluator,
)
from workspace_rbac.domain.exceptions import (
    DatabaseOperationException,
    InvalidOperationException,
    PermissionDeniedException,
    ResourceNotFoundException,
)
from workspace_rbac.domain.models.impersonation import ImpersonationContext, ImpersonationStatus
from workspace_rbac.domain.services.expiry_policy import ExpirySweepStrategy, get_sweep_strategy
from workspace_rbac.shared.utils.datetime_utils import DateTimeUtil

logger = logging.getLogger(__name__)


class AsyncImpersonationService:
    """Service layer for starting, ending and sweeping impersonation sessions."""

    def __init__(
            self,
            db_session: AsyncSession,
            evaluator: Optional[AsyncAuthorizationEvaluator] = None,
            sweep_strategy: Optional[ExpirySweepStrategy] = None,
    ):
        self.db = db_session
        self.evaluator = evaluator or AsyncAuthorizationEvaluator(db_session)
        self.sweep_strategy = sweep_strategy or get_sweep_strategy(settings.IMPERSONATION_SWEEP_MODE)

    # ────────────────────────────────
    # Capability
    # ────────────────────────────────
    async def can_impersonate(self, impersonator_id: UUID) -> bool:
        return await self.evaluator.has_capability(impersonator_id, *IMPERSONATION_CAPABILITY)

    # ────────────────────────────────
    # Lifecycle
    # ────────────────────────────────
    async def start_impersonation(self, impersonator_id: UUID, data: StartImpersonationRequest) -> ImpersonationSession:
        """
        Open an ACTIVE session for impersonator_id acting as data.impersonated_user_id.

        Raises:
            PermissionDeniedException: impersonator lacks user.impersonate
            ResourceNotFoundException: target user does not exist
            InvalidOperationException: self-impersonation, an ACTIVE session
                already exists, or expires_at is already past
        """
        if not await self.can_impersonate(impersonator_id):
            logger.warning(f"User {impersonator_id} attempted to impersonate without permission")
            raise PermissionDeniedException("You don't have permission to impersonate users")

        target = await user_repository.get(self.db, data.impersonated_user_id)
        if not target:
            logger.warning(f"Impersonation target not found: {data.impersonated_user_id}")
            raise ResourceNotFoundException(message="User to impersonate not found",
                                            resource_id=data.impersonated_user_id)

        if target.id == impersonator_id:
            logger.warning(f"User {impersonator_id} attempted to impersonate themselves")
            raise InvalidOperationException("Cannot impersonate yourself")

        existing = await impersonation_session_repository.get_active_for_impersonator(self.db, impersonator_id)
        if existing:
            logger.warning(f"User {impersonator_id} already has an active impersonation session {existing.id}")
            raise InvalidOperationException(
                "You already have an active impersonation session. Please end it first.",
                details={"session_id": str(existing.id)},
            )

        now = DateTimeUtil.for_storage()
        expires_at = DateTimeUtil.for_storage(data.expires_at) if data.expires_at else None
        if expires_at is not None and expires_at <= now:
            logger.warning(f"User {impersonator_id} requested an impersonation already expired at {expires_at}")
            raise InvalidOperationException("expires_at must be in the future")

        session = ImpersonationSession(
            impersonator_id=impersonator_id,
            impersonated_user_id=target.id,
            status=ImpersonationStatus.ACTIVE,
            started_at=now,
            expires_at=expires_at,
            reason=data.reason,
            session_metadata={
                "workspace_id": str(data.workspace_id) if data.workspace_id else None,
                "permissions": data.permissions or [],
                "ip_address": data.ip_address,
                "user_agent": data.user_agent,
            },
            is_active=True,
            created_by=impersonator_id,
            updated_by=impersonator_id,
        )

        try:
            self.db.add(session)
            await self.db.commit()
        except IntegrityError as e:
            # outra requisição abriu uma sessão para o mesmo impersonador
            await self.db.rollback()
            logger.warning(f"Concurrent impersonation start for {impersonator_id}: {e.orig}")
            raise InvalidOperationException("You already have an active impersonation session. Please end it first.")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error starting impersonation: {str(e)}")
            raise DatabaseOperationException(message="Error starting impersonation", original_error=e)

        logger.info(f"User {impersonator_id} started impersonating {target.id} (session {session.id})")
        return session

    async def end_impersonation(self, session_id: UUID, ended_by: UUID) -> ImpersonationSession:
        """
        Move an ACTIVE session to ENDED.

        Raises:
            ResourceNotFoundException: no ACTIVE session with that id
            PermissionDeniedException: ended_by is neither the impersonator nor capable
        """
        session = await impersonation_session_repository.get_active_by_id(self.db, session_id)
        if not session:
            logger.warning(f"Active impersonation session not found: {session_id}")
            raise ResourceNotFoundException(message="Active impersonation session not found",
                                            resource_id=session_id)

        if session.impersonator_id != ended_by and not await self.can_impersonate(ended_by):
            logger.warning(f"User {ended_by} attempted to end session {session_id} without permission")
            raise PermissionDeniedException("You don't have permission to end this impersonation session")

        try:
            session.status = ImpersonationStatus.ENDED
            session.ended_at = DateTimeUtil.for_storage()
            session.updated_by = ended_by
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error ending impersonation session {session_id}: {str(e)}")
            raise DatabaseOperationException(message="Error ending impersonation session", original_error=e)

        logger.info(f"Impersonation session {session_id} ended by {ended_by}")
        return session

    async def check_and_update_expired_sessions(self, now: Optional[datetime] = None) -> int:
        """
        Expire the ACTIVE sessions selected by the sweep strategy.

        Returns:
            Number of sessions moved to EXPIRED
        """
        now = DateTimeUtil.for_storage(now)
        active = await impersonation_session_repository.list_active(self.db)
        to_expire = self.sweep_strategy.select_sessions_to_expire(active, now)
        if not to_expire:
            return 0

        try:
            for session in to_expire:
                session.status = ImpersonationStatus.EXPIRED
                session.ended_at = now
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error expiring impersonation sessions: {str(e)}")
            raise DatabaseOperationException(message="Error expiring impersonation sessions", original_error=e)

        logger.info(f"Impersonation sweep ({self.sweep_strategy.name}) expired {len(to_expire)} session(s)")
        return len(to_expire)

    # ────────────────────────────────
    # Queries
    # ────────────────────────────────
    async def get_active_impersonation_session(self, impersonator_id: UUID) -> Optional[ImpersonationSession]:
        return await impersonation_session_repository.get_active_for_impersonator(self.db, impersonator_id)

    async def get_impersonation_context(self, impersonator_id: UUID) -> Optional[ImpersonationContext]:
        """Active session plus both user records, or None if any of them is missing."""
        session = await self.get_active_impersonation_session(impersonator_id)
        if not session:
            return None

        impersonator = await user_repository.get(self.db, session.impersonator_id)
        impersonated = await user_repository.get(self.db, session.impersonated_user_id)
        if not impersonator or not impersonated:
            return None

        return ImpersonationContext(session=session, impersonator=impersonator, impersonated_user=impersonated)

    async def get_impersonatable_users(self, impersonator_id: UUID) -> List[User]:
        return await user_repository.list_active_except(self.db, impersonator_id)

    async def get_impersonation_history(self, impersonator_id: UUID,
                                        limit: Optional[int] = None) -> List[ImpersonationSession]:
        """Sessions started by the impersonator, newest first."""
        if limit is None:
            limit = settings.IMPERSONATION_HISTORY_LIMIT
        return await impersonation_session_repository.list_history(self.db, impersonator_id, limit)

    async def get_all_active_sessions(self) -> List[ImpersonationSession]:
        return await impersonation_session_repository.list_active(self.db)
