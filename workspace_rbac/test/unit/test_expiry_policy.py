# workspace_rbac/test/unit/test_expiry_policy.py

# Para Rodar o Script:
# pytest workspace_rbac/test/unit/test_expiry_policy.py -v

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from workspace_rbac.domain.models.impersonation import ImpersonationStatus
from workspace_rbac.domain.services.expiry_policy import (
    ExpireAllActiveSessions,
    ExpireOverdueSessions,
    get_sweep_strategy,
)

NOW = datetime(2026, 1, 1, 12, 0, 0)


def _session(expires_at=None, status=ImpersonationStatus.ACTIVE):
    return SimpleNamespace(status=status, expires_at=expires_at)


@pytest.fixture
def sessions():
    return {
        "overdue": _session(NOW - timedelta(minutes=1)),
        "exact": _session(NOW),
        "future": _session(NOW + timedelta(hours=1)),
        "open_ended": _session(None),
    }


def test_overdue_strategy_selects_only_expired(sessions):
    selected = ExpireOverdueSessions().select_sessions_to_expire(list(sessions.values()), NOW)
    assert selected == [sessions["overdue"], sessions["exact"]]


def test_all_strategy_selects_every_active_session(sessions):
    selected = ExpireAllActiveSessions().select_sessions_to_expire(list(sessions.values()), NOW)
    assert len(selected) == 4


def test_terminal_sessions_are_never_selected():
    ended = _session(NOW - timedelta(days=1), status=ImpersonationStatus.ENDED)
    assert ExpireOverdueSessions().select_sessions_to_expire([ended], NOW) == []
    assert ExpireAllActiveSessions().select_sessions_to_expire([ended], NOW) == []


def test_get_sweep_strategy():
    assert isinstance(get_sweep_strategy("overdue"), ExpireOverdueSessions)
    assert isinstance(get_sweep_strategy("all"), ExpireAllActiveSessions)
    with pytest.raises(ValueError):
        get_sweep_strategy("sometimes")
