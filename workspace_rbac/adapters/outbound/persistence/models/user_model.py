# workspace_rbac/adapters/outbound/persistence/models/user_model.py

"""
Modelo de usuário.

Minimal identity-store table. Credentials, tokens and profile management
belong to the identity service; the permission core only needs existence,
the active flag and the superuser flag.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from workspace_rbac.adapters.outbound.persistence.models.base_model import Base


class User(Base):
    """
    Usuário do sistema.

    Attributes:
        id: Identificador único do usuário (UUID)
        email: Email do usuário
        first_name / last_name: Nome exibido
        is_active: Indica se o usuário está ativo
        is_superuser: Superusuários podem administrar permissões em qualquer workspace
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_superuser: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        """Representação em string do objeto User."""
        return f"<User(email={self.email}, active={self.is_active})>"
