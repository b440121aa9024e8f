# workspace_rbac/application/ports/outbound/__init__.py

from .generic_repository import IRepository
from .user_repository_port import IUserRepository
from .workspace_repository_port import IWorkspaceRepository
from .assignment_policy_port import PermissionAssignmentPolicy

__all__ = [
    "IRepository",
    "IUserRepository",
    "IWorkspaceRepository",
    "PermissionAssignmentPolicy",
]
