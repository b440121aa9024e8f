# workspace_rbac/domain/services/expiry_policy.py

"""
Sweep strategies for impersonation sessions.

The sweep asks a strategy which of the currently ACTIVE sessions must move
to EXPIRED. Two strategies exist:

- ExpireOverdueSessions: only sessions whose expires_at is set and is not
  after `now`. Sessions without expires_at never expire through the sweep.
- ExpireAllActiveSessions: every ACTIVE session, regardless of expires_at.
  This reproduces the historical coarse sweep.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Sequence

from workspace_rbac.domain.models.impersonation import ImpersonationStatus


class ExpirySweepStrategy(ABC):
    """Selects the sessions a sweep must expire."""

    name: str = "abstract"

    @abstractmethod
    def select_sessions_to_expire(self, active_sessions: Sequence, now: datetime) -> List:
        pass


class ExpireOverdueSessions(ExpirySweepStrategy):
    name = "overdue"

    def select_sessions_to_expire(self, active_sessions: Sequence, now: datetime) -> List:
        return [
            s for s in active_sessions
            if s.status == ImpersonationStatus.ACTIVE
            and s.expires_at is not None
            and s.expires_at <= now
        ]


class ExpireAllActiveSessions(ExpirySweepStrategy):
    name = "all"

    def select_sessions_to_expire(self, active_sessions: Sequence, now: datetime) -> List:
        return [s for s in active_sessions if s.status == ImpersonationStatus.ACTIVE]


_STRATEGIES = {
    ExpireOverdueSessions.name: ExpireOverdueSessions,
    ExpireAllActiveSessions.name: ExpireAllActiveSessions,
}


def get_sweep_strategy(mode: str) -> ExpirySweepStrategy:
    """Build the strategy registered under `mode` ("overdue" or "all")."""
    try:
        return _STRATEGIES[mode]()
    except KeyError:
        raise ValueError(f"Unknown impersonation sweep mode: {mode!r}")
