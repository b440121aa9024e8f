# workspace_rbac/adapters/outbound/persistence/models/permission_model.py

"""
Modelo de persistência para Permission.

Catalog entry pairing one resource with one action. Rows are inserted by
the seeder and afterwards only soft-deactivated.
"""

import uuid
from typing import Optional

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from workspace_rbac.adapters.outbound.persistence.models.base_model import AuditMixin, Base


class Permission(AuditMixin, Base):
    """
    Attributes:
        id: Identificador único da permissão
        name: Nome canônico "<resource>.<action>" (único)
        description: Texto legível
        resource: Valor de Resource
        action: Valor de Action
    """
    __tablename__ = "permissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    resource: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    def __repr__(self) -> str:
        """Representação em string do objeto Permission."""
        return f"<Permission(name={self.name})>"
