# workspace_rbac/test/integration/test_constraints.py

# Para Rodar o Script:
# pytest workspace_rbac/test/integration/test_constraints.py -v

import pytest
from sqlalchemy.exc import IntegrityError

from workspace_rbac.adapters.outbound.persistence.models import ImpersonationSession, UserWorkspacePermission
from workspace_rbac.domain.models.impersonation import ImpersonationStatus
from workspace_rbac.shared.utils.datetime_utils import DateTimeUtil


def _grant(user, workspace, is_active=True):
    return UserWorkspacePermission(
        user_id=user.id, workspace_id=workspace.id, permission_ids=[], is_active=is_active
    )


def _session(impersonator, target, status=ImpersonationStatus.ACTIVE):
    return ImpersonationSession(
        impersonator_id=impersonator.id,
        impersonated_user_id=target.id,
        status=status,
        started_at=DateTimeUtil.for_storage(),
        is_active=True,
    )


@pytest.mark.asyncio
async def test_single_active_grant_record(db_session, create_user, create_workspace):
    owner = await create_user()
    member = await create_user()
    workspace = await create_workspace(owner)

    db_session.add_all([_grant(member, workspace, is_active=False), _grant(member, workspace, is_active=False)])
    db_session.add(_grant(member, workspace))
    await db_session.commit()

    db_session.add(_grant(member, workspace))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_single_active_session_per_impersonator(db_session, create_user):
    admin = await create_user()
    first = await create_user()
    second = await create_user()

    db_session.add(_session(admin, first, status=ImpersonationStatus.ENDED))
    db_session.add(_session(admin, first, status=ImpersonationStatus.EXPIRED))
    db_session.add(_session(admin, first))
    await db_session.commit()

    db_session.add(_session(admin, second))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_version_counter_increments(db_session, create_user, create_workspace):
    owner = await create_user()
    member = await create_user()
    workspace = await create_workspace(owner)

    record = _grant(member, workspace)
    db_session.add(record)
    await db_session.commit()
    assert record.version == 1

    record.permission_ids = ["x"]
    await db_session.commit()
    assert record.version == 2


@pytest.mark.asyncio
async def test_audit_timestamps(db_session, create_user, create_workspace):
    owner = await create_user()
    member = await create_user()
    workspace = await create_workspace(owner)

    record = _grant(member, workspace)
    db_session.add(record)
    await db_session.commit()
    assert record.created_at is not None
    assert record.updated_at == record.created_at
    assert record.deleted_at is None

    record.is_active = False
    await db_session.commit()
    assert record.deleted_at is not None
    assert record.updated_at >= record.created_at
