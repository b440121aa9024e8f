# workspace_rbac/adapters/outbound/persistence/models/workspace_model.py

import uuid
from typing import Optional

from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from workspace_rbac.adapters.outbound.persistence.models.base_model import AuditMixin, Base


class Workspace(AuditMixin, Base):
    """Tenant container for campaigns, content and ad-platform assets."""
    __tablename__ = "workspaces"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Workspace(name={self.name})>"
