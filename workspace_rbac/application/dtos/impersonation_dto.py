# workspace_rbac/application/dtos/impersonation_dto.py

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field

from workspace_rbac.application.dtos.base_dto import CustomBaseModel
from workspace_rbac.application.dtos.permission_dto import UserSummary
from workspace_rbac.domain.models.impersonation import ImpersonationStatus


class StartImpersonationRequest(CustomBaseModel):
    """Schema for starting an impersonation session."""
    impersonated_user_id: UUID = Field(..., description="User to act as")
    reason: Optional[str] = Field(None, max_length=1000, description="Why the session is needed")
    expires_at: Optional[datetime] = Field(None, description="Optional expiry (UTC)")
    workspace_id: Optional[UUID] = Field(None, description="Workspace the session is about (informational)")
    permissions: Optional[List[str]] = Field(None, description="Permissions the session is meant for (informational)")
    ip_address: Optional[str] = Field(None, description="Filled from the request when omitted")
    user_agent: Optional[str] = Field(None, description="Filled from the request when omitted")


class ImpersonationSessionOutput(CustomBaseModel):
    """Schema for impersonation session output."""
    id: UUID
    impersonator_id: UUID
    impersonated_user_id: UUID
    status: ImpersonationStatus
    started_at: datetime
    ended_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    reason: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="session_metadata")


class ImpersonationContextOutput(CustomBaseModel):
    session: ImpersonationSessionOutput
    impersonator: UserSummary
    impersonated_user: UserSummary


class SweepResult(CustomBaseModel):
    expired: int = Field(..., description="Number of sessions moved to EXPIRED")
    strategy: str = Field(..., description="Sweep strategy used")
