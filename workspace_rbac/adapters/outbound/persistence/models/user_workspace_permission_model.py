# workspace_rbac/adapters/outbound/persistence/models/user_workspace_permission_model.py

"""
Modelo de persistência para UserWorkspacePermission (grant record).

One row carries the whole permission-id set of a user inside a workspace.
At most one active row may exist per (user_id, workspace_id); the partial
unique index below enforces it at storage level and the ``version`` column
turns concurrent read-modify-write cycles into StaleDataError.
"""

import uuid
from typing import List

from sqlalchemy import ForeignKey, Index, Integer, JSON, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from workspace_rbac.adapters.outbound.persistence.models.base_model import AuditMixin, Base


class UserWorkspacePermission(AuditMixin, Base):
    __tablename__ = "user_workspace_permissions"
    __table_args__ = (
        Index(
            "uq_user_workspace_permissions_active",
            "user_id",
            "workspace_id",
            unique=True,
            postgresql_where=text("is_active = true"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Permission UUIDs as strings; deduplicated, order irrelevant
    permission_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def permission_id_set(self) -> set[uuid.UUID]:
        """Ids do registro como conjunto de UUIDs."""
        return {uuid.UUID(str(pid)) for pid in (self.permission_ids or [])}

    def __repr__(self) -> str:
        return (
            f"<UserWorkspacePermission(user_id={self.user_id}, workspace_id={self.workspace_id}, "
            f"permissions={len(self.permission_ids or [])}, active={self.is_active})>"
        )
