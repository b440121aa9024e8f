# workspace_rbac/application/use_cases/user_workspace_permission_use_cases.py

"""
Service for per-workspace permission grants.

Each (user, workspace) pair owns at most one active grant record holding a
set of permission ids. Every mutation is a read-modify-write executed by
_run_atomic: the active record is read with SELECT ... FOR UPDATE, changed,
flushed and committed. Losing a race (partial unique index or version
counter) rolls back and repeats the whole cycle a bounded number of times.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from workspace_rbac.adapters.configuration.config import settings
from workspace_rbac.adapters.outbound.persistence.models import Permission, UserWorkspacePermission
from workspace_rbac.adapters.outbound.persistence.repositories.permission_repository import permission_repository
from workspace_rbac.adapters.outbound.persistence.repositories.user_repository import user_repository
from workspace_rbac.adapters.outbound.persistence.repositories.user_workspace_permission_repository import (
    user_workspace_permission_repository,
)
from workspace_rbac.adapters.outbound.persistence.repositories.workspace_repository import workspace_repository
from workspace_rbac.adapters.outbound.security.permissions import default_assignment_policy
from workspace_rbac.application.ports.outbound import PermissionAssignmentPolicy
from workspace_rbac.domain.exceptions import (
    ConcurrentModificationException,
    DatabaseOperationException,
    DomainException,
    PermissionDeniedException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
)
from workspace_rbac.domain.models.permission import Action, Resource, get_permission_name, is_valid_combination
from workspace_rbac.shared.utils.datetime_utils import DateTimeUtil

logger = logging.getLogger(__name__)

T = TypeVar("T")

PermissionPair = Tuple[Resource, Action]


class AsyncUserWorkspacePermissionService:
    """Grant store: assign, revoke and query permission sets per (user, workspace)."""

    def __init__(
            self,
            db_session: AsyncSession,
            assignment_policy: Optional[PermissionAssignmentPolicy] = None,
            max_retries: Optional[int] = None,
    ):
        self.db = db_session
        self.assignment_policy = assignment_policy or default_assignment_policy
        self.max_retries = max_retries or settings.GRANT_WRITE_MAX_RETRIES

    # ────────────────────────────────
    # Helpers
    # ────────────────────────────────
    async def _run_atomic(self, operation: Callable[[], Awaitable[T]], *, commit: bool = True,
                          description: str = "grant update") -> T:
        """
        Execute a read-modify-write with retry on write conflicts.

        Args:
            operation: coroutine factory performing the read and the mutation
            commit: commit on success (True) or only flush, leaving the
                transaction to the caller (False). Without commit there is no
                retry: a conflict aborts the caller's whole unit of work.
            description: used in log lines

        A retry rolls the session back, which expires every instance loaded
        in it; operations must close over plain values (ids, names), never
        over ORM instances read before the call.

        Raises:
            ConcurrentModificationException: conflicts persisted after max_retries attempts
            DatabaseOperationException: any other storage failure
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                result = await operation()
                if commit:
                    await self.db.commit()
                else:
                    await self.db.flush()
                return result

            except DomainException:
                if commit:
                    await self._release_after_rejection()
                raise

            except (IntegrityError, StaleDataError) as e:
                if commit:
                    await self.db.rollback()
                if not commit or attempt >= self.max_retries:
                    logger.warning(f"{description}: write conflict not resolved after {attempt} attempt(s): {e}")
                    raise ConcurrentModificationException(
                        f"Concurrent modification while performing {description}",
                        details={"attempts": attempt},
                    )
                logger.info(f"{description}: write conflict on attempt {attempt}, retrying")

            except SQLAlchemyError as e:
                if commit:
                    await self.db.rollback()
                logger.exception(f"Error during {description}: {str(e)}")
                raise DatabaseOperationException(message=f"Error during {description}", original_error=e)

    async def _release_after_rejection(self) -> None:
        """
        End the transaction of a rejected read-modify-write.

        Rejections happen before any mutation, so committing only releases the
        row lock and keeps the caller's instances loaded. Pending changes, if
        any, are discarded with a rollback.
        """
        if self.db.new or self.db.dirty or self.db.deleted:
            await self.db.rollback()
        else:
            await self.db.commit()

    async def _ensure_can_assign(self, actor_id: UUID, workspace_id: UUID) -> None:
        if not await self.assignment_policy.can_assign(self.db, actor_id, workspace_id):
            logger.warning(f"User {actor_id} is not allowed to manage permissions of workspace {workspace_id}")
            raise PermissionDeniedException("You don't have permission to manage permissions in this workspace")

    async def _ensure_user_and_workspace(self, user_id: UUID, workspace_id: UUID) -> None:
        user = await user_repository.get(self.db, user_id)
        if not user:
            logger.warning(f"User not found: {user_id}")
            raise ResourceNotFoundException(message="User not found", resource_id=user_id)

        workspace = await workspace_repository.get(self.db, workspace_id)
        if not workspace or not workspace.is_active:
            logger.warning(f"Workspace not found: {workspace_id}")
            raise ResourceNotFoundException(message="Workspace not found", resource_id=workspace_id)

    async def _resolve_permission(self, resource: Resource, action: Action) -> Optional[Permission]:
        if not is_valid_combination(resource, action):
            return None
        return await permission_repository.get_active_by_resource_action(self.db, resource, action)

    async def _resolve_permissions(self, permissions: Iterable[PermissionPair]) -> List[Permission]:
        names = {
            get_permission_name(resource, action)
            for resource, action in permissions
            if is_valid_combination(resource, action)
        }
        return await permission_repository.list_active_by_names(self.db, names)

    def _new_record(self, user_id: UUID, workspace_id: UUID, permission_ids: Iterable[UUID],
                    actor_id: UUID) -> UserWorkspacePermission:
        record = UserWorkspacePermission(
            user_id=user_id,
            workspace_id=workspace_id,
            permission_ids=sorted({str(pid) for pid in permission_ids}),
            is_active=True,
            created_by=actor_id,
            updated_by=actor_id,
        )
        self.db.add(record)
        return record

    def _deactivate(self, record: UserWorkspacePermission, actor_id: UUID) -> None:
        record.is_active = False
        record.deleted_at = DateTimeUtil.for_storage()
        record.updated_by = actor_id

    # ────────────────────────────────
    # Assign
    # ────────────────────────────────
    async def assign_permission(
            self,
            user_id: UUID,
            workspace_id: UUID,
            resource: Resource,
            action: Action,
            assigned_by: UUID,
            commit: bool = True,
            recorded_by: Optional[UUID] = None,
    ) -> UserWorkspacePermission:
        """
        Add one permission to the user's set in the workspace.

        assigned_by is the identity checked against the assignment policy;
        recorded_by, when given, is the one written to the audit fields
        (the real user behind an impersonation session).

        Raises:
            PermissionDeniedException: assigned_by may not manage this workspace
            ResourceNotFoundException: user, workspace or permission missing
            ResourceAlreadyExistsException: the permission is already in the set
        """
        await self._ensure_can_assign(assigned_by, workspace_id)
        await self._ensure_user_and_workspace(user_id, workspace_id)
        recorded_by = recorded_by or assigned_by

        permission = await self._resolve_permission(resource, action)
        if not permission:
            name = f"{Resource(resource).value}.{Action(action).value}"
            logger.warning(f"Permission not found: {name}")
            raise ResourceNotFoundException(message=f"Permission '{name}' not found", resource_id=name)

        permission_id = str(permission.id)
        permission_name = permission.name

        async def operation() -> UserWorkspacePermission:
            record = await user_workspace_permission_repository.get_active(
                self.db, user_id, workspace_id, for_update=True
            )
            if record is None:
                return self._new_record(user_id, workspace_id, [permission_id], recorded_by)

            current = list(record.permission_ids or [])
            if permission_id in current:
                logger.warning(f"Permission {permission_name} already assigned to user {user_id} in {workspace_id}")
                raise ResourceAlreadyExistsException(
                    message=f"User already has permission '{permission_name}' in this workspace"
                )
            record.permission_ids = current + [permission_id]
            record.updated_by = recorded_by
            return record

        record = await self._run_atomic(operation, commit=commit, description="assign permission")
        logger.info(f"Permission {permission_name} assigned to user {user_id} in workspace {workspace_id}")
        return record

    async def assign_multiple_permissions(
            self,
            user_id: UUID,
            workspace_id: UUID,
            permissions: Iterable[PermissionPair],
            assigned_by: UUID,
            commit: bool = True,
            recorded_by: Optional[UUID] = None,
    ) -> UserWorkspacePermission:
        """
        Merge several permissions into the user's set (set union, idempotent).

        Pairs that do not resolve to an active catalog entry are dropped.

        Raises:
            PermissionDeniedException: assigned_by may not manage this workspace
            ResourceNotFoundException: user or workspace missing, or nothing resolved
        """
        await self._ensure_can_assign(assigned_by, workspace_id)
        await self._ensure_user_and_workspace(user_id, workspace_id)
        recorded_by = recorded_by or assigned_by

        resolved = await self._resolve_permissions(permissions)
        if not resolved:
            logger.warning(f"No valid permissions to assign to user {user_id} in workspace {workspace_id}")
            raise ResourceNotFoundException(message="No valid permissions found")

        resolved_ids = {str(p.id) for p in resolved}

        async def operation() -> UserWorkspacePermission:
            record = await user_workspace_permission_repository.get_active(
                self.db, user_id, workspace_id, for_update=True
            )
            if record is None:
                return self._new_record(user_id, workspace_id, resolved_ids, recorded_by)

            merged = set(record.permission_ids or []) | resolved_ids
            if merged != set(record.permission_ids or []):
                record.permission_ids = sorted(merged)
                record.updated_by = recorded_by
            return record

        record = await self._run_atomic(operation, commit=commit, description="assign multiple permissions")
        logger.info(f"{len(resolved_ids)} permission(s) merged for user {user_id} in workspace {workspace_id}")
        return record

    async def bulk_assign_permissions(
            self,
            workspace_id: UUID,
            user_permissions: Iterable[Tuple[UUID, Iterable[PermissionPair]]],
            assigned_by: UUID,
            recorded_by: Optional[UUID] = None,
    ) -> List[UserWorkspacePermission]:
        """
        Assign permission lists to several users, one committed unit per user.

        The first failure propagates; users processed before it keep their grants.
        """
        records = []
        for user_id, permissions in user_permissions:
            records.append(
                await self.assign_multiple_permissions(
                    user_id, workspace_id, permissions, assigned_by, recorded_by=recorded_by
                )
            )
        logger.info(f"Bulk assignment finished for {len(records)} user(s) in workspace {workspace_id}")
        return records

    # ────────────────────────────────
    # Remove
    # ────────────────────────────────
    async def remove_permission(
            self,
            user_id: UUID,
            workspace_id: UUID,
            resource: Resource,
            action: Action,
            removed_by: UUID,
            recorded_by: Optional[UUID] = None,
    ) -> bool:
        """
        Remove one permission from the user's set.

        The record is deactivated when its set becomes empty.

        Returns:
            False if the permission, the record or the id is absent; True otherwise
        """
        await self._ensure_can_assign(removed_by, workspace_id)
        recorded_by = recorded_by or removed_by

        permission = await self._resolve_permission(resource, action)
        if not permission:
            return False
        permission_id = str(permission.id)
        permission_name = permission.name

        async def operation() -> bool:
            record = await user_workspace_permission_repository.get_active(
                self.db, user_id, workspace_id, for_update=True
            )
            if record is None or permission_id not in (record.permission_ids or []):
                return False

            remaining = [pid for pid in record.permission_ids if pid != permission_id]
            record.permission_ids = remaining
            record.updated_by = recorded_by
            if not remaining:
                self._deactivate(record, recorded_by)
            return True

        removed = await self._run_atomic(operation, description="remove permission")
        if removed:
            logger.info(f"Permission {permission_name} removed from user {user_id} in workspace {workspace_id}")
        return removed

    async def remove_all_user_workspace_permissions(self, user_id: UUID, workspace_id: UUID, removed_by: UUID,
                                                    recorded_by: Optional[UUID] = None) -> bool:
        """Deactivate the active record. Returns whether one was affected."""
        await self._ensure_can_assign(removed_by, workspace_id)
        recorded_by = recorded_by or removed_by

        async def operation() -> bool:
            record = await user_workspace_permission_repository.get_active(
                self.db, user_id, workspace_id, for_update=True
            )
            if record is None:
                return False
            self._deactivate(record, recorded_by)
            return True

        removed = await self._run_atomic(operation, description="remove all permissions")
        if removed:
            logger.info(f"All permissions removed from user {user_id} in workspace {workspace_id}")
        return removed

    # ────────────────────────────────
    # Queries
    # ────────────────────────────────
    async def _get_active_record(self, user_id: UUID, workspace_id: UUID) -> Optional[UserWorkspacePermission]:
        try:
            return await user_workspace_permission_repository.get_active(self.db, user_id, workspace_id)
        except SQLAlchemyError as e:
            logger.exception(f"Error fetching grant record: {str(e)}")
            raise DatabaseOperationException(message="Error fetching user workspace permissions", original_error=e)

    async def get_user_workspace_permissions(self, user_id: UUID, workspace_id: UUID) -> List[Permission]:
        """Active permissions held by the user in the workspace (empty without a record)."""
        record = await self._get_active_record(user_id, workspace_id)
        if record is None:
            return []
        return await permission_repository.list_active_by_ids(self.db, record.permission_id_set)

    async def get_user_workspaces_with_permissions(self, user_id: UUID) -> List[Dict[str, Any]]:
        """One entry per workspace where the user holds an active record."""
        records = await user_workspace_permission_repository.list_active_for_user(self.db, user_id)
        workspaces = {
            w.id: w for w in await workspace_repository.get_many(self.db, [r.workspace_id for r in records])
        }

        result = []
        for record in records:
            result.append({
                "workspace_id": record.workspace_id,
                "workspace": workspaces.get(record.workspace_id),
                "permissions": await permission_repository.list_active_by_ids(self.db, record.permission_id_set),
            })
        return result

    async def get_workspace_users_with_permissions(self, workspace_id: UUID) -> List[Dict[str, Any]]:
        """One entry per user holding an active record in the workspace."""
        records = await user_workspace_permission_repository.list_active_for_workspace(self.db, workspace_id)
        users = {u.id: u for u in await user_repository.get_many(self.db, [r.user_id for r in records])}

        result = []
        for record in records:
            result.append({
                "user_id": record.user_id,
                "user": users.get(record.user_id),
                "permissions": await permission_repository.list_active_by_ids(self.db, record.permission_id_set),
            })
        return result

    async def user_has_permission(self, user_id: UUID, workspace_id: UUID, resource: Resource, action: Action) -> bool:
        permission = await self._resolve_permission(resource, action)
        if not permission:
            return False
        record = await self._get_active_record(user_id, workspace_id)
        return record is not None and str(permission.id) in (record.permission_ids or [])

    async def user_has_workspace_access(self, user_id: UUID, workspace_id: UUID) -> bool:
        """True when an active record with at least one permission exists."""
        record = await self._get_active_record(user_id, workspace_id)
        return record is not None and bool(record.permission_ids)

    async def user_has_permission_in_any_workspace(self, user_id: UUID, resource: Resource, action: Action) -> bool:
        permission = await self._resolve_permission(resource, action)
        if not permission:
            return False
        permission_id = str(permission.id)
        records = await user_workspace_permission_repository.list_active_for_user(self.db, user_id)
        return any(permission_id in (r.permission_ids or []) for r in records)
