# workspace_rbac/application/dtos/permission_dto.py

"""
Schemas for the permission catalog and for permission grants.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field

from workspace_rbac.application.dtos.base_dto import CustomBaseModel
from workspace_rbac.domain.models.permission import Action, Resource


class PermissionOutput(CustomBaseModel):
    """Schema for permission output."""
    id: UUID = Field(..., description="ID of the permission")
    name: str = Field(..., description="Canonical name <resource>.<action>")
    description: Optional[str] = Field(None, description="Human readable description")
    resource: str = Field(..., description="Resource of the permission")
    action: str = Field(..., description="Action of the permission")
    is_active: bool = Field(True, description="Whether the permission is active")


class SeedResult(CustomBaseModel):
    created: int = Field(..., description="Number of permissions created by this call")


class PermissionRef(CustomBaseModel):
    """A (resource, action) pair."""
    resource: Resource = Field(..., description="Resource")
    action: Action = Field(..., description="Action")

    def as_pair(self):
        return self.resource, self.action


class AssignPermissionRequest(CustomBaseModel):
    """Schema for assigning one permission."""
    user_id: UUID = Field(..., description="User receiving the permission")
    workspace_id: UUID = Field(..., description="Target workspace")
    resource: Resource = Field(..., description="Resource")
    action: Action = Field(..., description="Action")


class AssignMultiplePermissionsRequest(CustomBaseModel):
    """Schema for merging several permissions into a user's set."""
    user_id: UUID = Field(..., description="User receiving the permissions")
    workspace_id: UUID = Field(..., description="Target workspace")
    permissions: List[PermissionRef] = Field(..., min_length=1, description="Permissions to add")


class UserPermissionsEntry(CustomBaseModel):
    user_id: UUID = Field(..., description="User receiving the permissions")
    permissions: List[PermissionRef] = Field(..., min_length=1, description="Permissions to add")


class BulkAssignRequest(CustomBaseModel):
    """
    Permission lists for several users. Each user is committed on its own:
    the first failure stops the batch and earlier users keep their grants.
    """
    user_permissions: List[UserPermissionsEntry] = Field(..., min_length=1, description="Per-user permissions")


class RemovePermissionRequest(CustomBaseModel):
    resource: Resource = Field(..., description="Resource")
    action: Action = Field(..., description="Action")


class CheckPermissionRequest(CustomBaseModel):
    resource: Resource = Field(..., description="Resource")
    action: Action = Field(..., description="Action")


class UserWorkspacePermissionOutput(CustomBaseModel):
    """Schema for a grant record."""
    id: UUID = Field(..., description="ID of the grant record")
    user_id: UUID = Field(..., description="User")
    workspace_id: UUID = Field(..., description="Workspace")
    permission_ids: List[UUID] = Field(default_factory=list, description="Granted permission ids")
    is_active: bool = Field(..., description="Whether the record is active")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp (UTC)")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp (UTC)")


class WorkspaceSummary(CustomBaseModel):
    id: UUID
    name: str
    description: Optional[str] = None


class UserSummary(CustomBaseModel):
    id: UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserWorkspacePermissionsOutput(CustomBaseModel):
    """Workspace entry of a user's permission overview."""
    workspace_id: UUID
    workspace: Optional[WorkspaceSummary] = None
    permissions: List[PermissionOutput] = Field(default_factory=list)


class WorkspaceUserPermissionsOutput(CustomBaseModel):
    """User entry of a workspace's permission overview."""
    user_id: UUID
    user: Optional[UserSummary] = None
    permissions: List[PermissionOutput] = Field(default_factory=list)


class PermissionCheckResult(CustomBaseModel):
    allowed: bool = Field(..., description="Result of the check")
    details: Optional[Dict[str, Any]] = None
