# workspace_rbac/adapters/outbound/persistence/models/user_workspace_model.py

import uuid

from sqlalchemy import Enum as SAEnum, ForeignKey, Index, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from workspace_rbac.adapters.outbound.persistence.models.base_model import AuditMixin, Base
from workspace_rbac.domain.models.workspace import WorkspaceAccessLevel


class UserWorkspace(AuditMixin, Base):
    """
    Membership of a user in a workspace with a coarse access level.

    Independent from UserWorkspacePermission: a member may hold no
    fine-grained permission and a grant holder may not be a member.
    """
    __tablename__ = "user_workspaces"
    __table_args__ = (
        Index(
            "uq_user_workspaces_active_member",
            "user_id",
            "workspace_id",
            unique=True,
            postgresql_where=text("is_active = true"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    access_level: Mapped[WorkspaceAccessLevel] = mapped_column(
        SAEnum(
            WorkspaceAccessLevel,
            name="workspace_access_level",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=WorkspaceAccessLevel.VIEWER,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserWorkspace(user_id={self.user_id}, workspace_id={self.workspace_id}, level={self.access_level})>"
