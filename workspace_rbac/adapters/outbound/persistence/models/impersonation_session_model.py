# workspace_rbac/adapters/outbound/persistence/models/impersonation_session_model.py

"""
Modelo de persistência para ImpersonationSession.

Sessions are audit records: they are never deleted and never leave a
terminal status (ENDED, EXPIRED).
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Index, JSON, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from workspace_rbac.adapters.outbound.persistence.models.base_model import AuditMixin, Base
from workspace_rbac.domain.models.impersonation import ImpersonationStatus


class ImpersonationSession(AuditMixin, Base):
    """
    Attributes:
        impersonator_id: Usuário real que iniciou a sessão
        impersonated_user_id: Usuário cuja identidade é assumida
        status: active | ended | expired
        started_at / ended_at / expires_at: Marcos temporais (UTC naive)
        reason: Justificativa opcional
        session_metadata: Coluna "metadata" (workspace_id, permissions, ip_address, user_agent)
    """
    __tablename__ = "impersonation_sessions"
    __table_args__ = (
        Index(
            "uq_impersonation_sessions_one_active",
            "impersonator_id",
            unique=True,
            postgresql_where=text("status = 'active' AND is_active = true"),
            sqlite_where=text("status = 'active' AND is_active = 1"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    impersonator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    impersonated_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[ImpersonationStatus] = mapped_column(
        SAEnum(
            ImpersonationStatus,
            name="impersonation_status",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=ImpersonationStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    session_metadata: Mapped[Optional[Dict[str, Any]]] = mapped_column("metadata", JSON, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<ImpersonationSession(impersonator_id={self.impersonator_id}, "
            f"impersonated_user_id={self.impersonated_user_id}, status={self.status})>"
        )
