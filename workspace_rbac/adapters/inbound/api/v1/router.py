# workspace_rbac/adapters/inbound/api/v1/router.py

from fastapi import APIRouter
# Manter em ordem alfabética
from workspace_rbac.adapters.inbound.api.v1.endpoints import (
    impersonation_endpoint,
    permission_endpoint,
    user_workspace_permission_endpoint,
    workspace_endpoint,
)

api_router = APIRouter()

# Catálogo de permissões e concessões por workspace
api_router.include_router(permission_endpoint.router)
api_router.include_router(user_workspace_permission_endpoint.router)

# Workspaces e membros
api_router.include_router(workspace_endpoint.router)

# Impersonação
api_router.include_router(impersonation_endpoint.router)
