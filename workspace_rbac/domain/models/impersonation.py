# workspace_rbac/domain/models/impersonation.py

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ImpersonationStatus(str, Enum):
    """Lifecycle states of an impersonation session. ENDED and EXPIRED are terminal."""
    ACTIVE = "active"
    ENDED = "ended"
    EXPIRED = "expired"


@dataclass
class ImpersonationContext:
    """Active session together with both resolved user records."""
    session: Any
    impersonator: Any
    impersonated_user: Any
