# workspace_rbac/domain/models/permission.py

"""
Domain model for permissions.

A permission pairs one Resource with one Action. Its canonical name is
"<resource>.<action>" and is globally unique.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Resource(str, Enum):
    """Protectable subjects inside a workspace."""
    WORKSPACE = "workspace"
    CAMPAIGN = "campaign"
    DESIGNER = "designer"
    PUBLISHER = "publisher"
    USER = "user"
    AGENCY = "agency"
    SOCIAL_MEDIA = "social_media"


class Action(str, Enum):
    """Operations that can be granted on a resource."""
    CREATE = "create"
    UPDATE = "update"
    VIEW = "view"
    DELETE = "delete"
    APPROVE = "approve"
    UPLOAD = "upload"
    IMPERSONATE = "impersonate"


@dataclass(frozen=True)
class PermissionData:
    """Candidate catalog entry produced by the generator."""
    name: str
    description: str
    resource: Resource
    action: Action


def get_permission_name(resource: Resource, action: Action) -> str:
    """Build the canonical permission name from resource and action."""
    return f"{Resource(resource).value}.{Action(action).value}"


def parse_permission_name(permission_name: str) -> Optional[Tuple[Resource, Action]]:
    """
    Split a permission name back into (Resource, Action).

    Returns None when the name is malformed or references an unknown
    resource or action.
    """
    parts = permission_name.split(".")
    if len(parts) != 2:
        return None

    resource_str, action_str = parts
    try:
        return Resource(resource_str), Action(action_str)
    except ValueError:
        return None


def is_valid_combination(resource: Resource, action: Action) -> bool:
    """UPLOAD is only meaningful for the DESIGNER resource."""
    if action == Action.UPLOAD and resource != Resource.DESIGNER:
        return False
    return True
