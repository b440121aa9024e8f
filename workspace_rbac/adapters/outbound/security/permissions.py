# workspace_rbac/adapters/outbound/security/permissions.py

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workspace_rbac.adapters.outbound.persistence.repositories.user_repository import user_repository
from workspace_rbac.adapters.outbound.persistence.repositories.workspace_repository import workspace_repository
from workspace_rbac.application.ports.outbound import PermissionAssignmentPolicy
from workspace_rbac.domain.models.workspace import ELEVATED_ACCESS_LEVELS


class ElevatedRoleAssignmentPolicy(PermissionAssignmentPolicy):
    """
    Superusuários ativos podem alterar permissões de qualquer workspace.
    Demais usuários precisam de vínculo ativo OWNER ou ADMIN no workspace alvo.
    """

    async def can_assign(self, db: AsyncSession, actor_id: UUID, workspace_id: UUID) -> bool:
        actor = await user_repository.get(db, actor_id)
        if not actor or not actor.is_active:
            return False
        if actor.is_superuser:
            return True

        membership = await workspace_repository.get_membership(db, actor_id, workspace_id)
        return membership is not None and membership.access_level in ELEVATED_ACCESS_LEVELS


class AllowAllAssignmentPolicy(PermissionAssignmentPolicy):
    """Trusted internal callers (seed scripts, migrations of legacy grants)."""

    async def can_assign(self, db: AsyncSession, actor_id: UUID, workspace_id: UUID) -> bool:
        return True


default_assignment_policy = ElevatedRoleAssignmentPolicy()
