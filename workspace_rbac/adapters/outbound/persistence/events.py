# workspace_rbac/adapters/outbound/persistence/events.py

"""
Mapper hooks that keep the audit timestamps of RBAC rows consistent.

Catalog entries, workspaces, memberships, grant records and users all carry
created_at / updated_at, stored as naive UTC. Rows are never hard-deleted:
a membership or grant record is retired by flipping is_active, and the hook
stamps deleted_at at that moment when the caller did not set it.
"""

import logging

from sqlalchemy import event, inspect

from workspace_rbac.shared.utils.datetime_utils import DateTimeUtil

logger = logging.getLogger(__name__)

_registered = False


def _was_deactivated(target) -> bool:
    if not hasattr(target, "is_active") or target.is_active:
        return False
    return inspect(target).attrs.is_active.history.has_changes()


def _stamp_insert(mapper, connection, target):
    now = DateTimeUtil.for_storage()
    if hasattr(target, "created_at") and target.created_at is None:
        target.created_at = now
    if hasattr(target, "updated_at"):
        target.updated_at = now


def _stamp_update(mapper, connection, target):
    now = DateTimeUtil.for_storage()
    if hasattr(target, "updated_at"):
        target.updated_at = now
    if hasattr(target, "deleted_at") and target.deleted_at is None and _was_deactivated(target):
        target.deleted_at = now


def register_datetime_events():
    """Attach the timestamp hooks to every mapped model. Idempotent."""
    global _registered
    if _registered:
        return

    from workspace_rbac.adapters.outbound.persistence.models.base_model import Base

    event.listen(Base, "before_insert", _stamp_insert, propagate=True)
    event.listen(Base, "before_update", _stamp_update, propagate=True)

    _registered = True
    logger.info("Audit timestamp hooks registered")
