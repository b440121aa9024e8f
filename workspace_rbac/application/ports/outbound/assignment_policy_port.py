# workspace_rbac/application/ports/outbound/assignment_policy_port.py

from abc import ABC, abstractmethod
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession


class PermissionAssignmentPolicy(ABC):
    """
    Decides whether an actor may change the grants of a workspace.

    Consulted before every grant mutation. Returning False makes the
    mutation fail with PermissionDeniedException.
    """

    @abstractmethod
    async def can_assign(self, db: AsyncSession, actor_id: UUID, workspace_id: UUID) -> bool:
        pass
