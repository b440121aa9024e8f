# workspace_rbac/application/dtos/workspace_dto.py

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from workspace_rbac.application.dtos.base_dto import CustomBaseModel
from workspace_rbac.application.dtos.permission_dto import UserSummary
from workspace_rbac.domain.models.workspace import WorkspaceAccessLevel


class WorkspaceCreate(CustomBaseModel):
    """Schema for creating a workspace."""
    name: str = Field(..., min_length=1, max_length=255, description="Name of the workspace")
    description: Optional[str] = Field(None, description="Optional description")


class WorkspaceOutput(CustomBaseModel):
    """Schema for workspace output."""
    id: UUID
    name: str
    description: Optional[str] = None
    owner_id: UUID
    is_active: bool
    created_at: Optional[datetime] = None


class UserWorkspaceOutput(CustomBaseModel):
    workspace: WorkspaceOutput
    access_level: WorkspaceAccessLevel


class MemberAdd(CustomBaseModel):
    """Schema for adding a member."""
    user_id: UUID = Field(..., description="User to add")
    access_level: WorkspaceAccessLevel = Field(WorkspaceAccessLevel.VIEWER, description="Access level")


class MemberUpdate(CustomBaseModel):
    access_level: WorkspaceAccessLevel = Field(..., description="New access level")


class MembershipOutput(CustomBaseModel):
    id: UUID
    user_id: UUID
    workspace_id: UUID
    access_level: WorkspaceAccessLevel
    is_active: bool


class WorkspaceMemberOutput(CustomBaseModel):
    user: UserSummary
    access_level: WorkspaceAccessLevel
