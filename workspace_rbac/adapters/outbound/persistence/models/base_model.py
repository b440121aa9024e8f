# workspace_rbac/adapters/outbound/persistence/models/base_model.py

"""
Base class and shared columns for SQLAlchemy models.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base declarativa para todos os modelos."""


class AuditMixin:
    """
    Soft-delete flag and audit columns.

    created_by / updated_by are plain user ids. The identity store owns user
    records, so there is no ORM relationship behind them.
    """

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    updated_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)


def register_all_events():
    """
    Registra todos os eventos para os modelos.
    """
    from workspace_rbac.adapters.outbound.persistence.events import register_datetime_events
    register_datetime_events()
