# workspace_rbac/domain/models/workspace.py

from enum import Enum


class WorkspaceAccessLevel(str, Enum):
    """
    Coarse membership level of a user in a workspace.

    Not consulted by the permission evaluator; fine-grained access lives in
    the per-(user, workspace) grant record.
    """
    OWNER = "owner"
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"
    APPROVER = "approver"


# Níveis que podem administrar permissões do workspace
ELEVATED_ACCESS_LEVELS = frozenset({WorkspaceAccessLevel.OWNER, WorkspaceAccessLevel.ADMIN})
