# workspace_rbac/adapters/outbound/persistence/models/__init__.py

"""
Módulo de modelos de dados.

Este módulo exporta todos os modelos SQLAlchemy do sistema,
facilitando a importação e uso em outros módulos.
"""

# Importar Base
from workspace_rbac.adapters.outbound.persistence.models.base_model import AuditMixin, Base

# Identidade e workspaces
from workspace_rbac.adapters.outbound.persistence.models.user_model import User
from workspace_rbac.adapters.outbound.persistence.models.workspace_model import Workspace
from workspace_rbac.adapters.outbound.persistence.models.user_workspace_model import UserWorkspace

# Modelos de autorização
from workspace_rbac.adapters.outbound.persistence.models.permission_model import Permission
from workspace_rbac.adapters.outbound.persistence.models.user_workspace_permission_model import (
    UserWorkspacePermission,
)
from workspace_rbac.adapters.outbound.persistence.models.impersonation_session_model import (
    ImpersonationSession,
)

# Exportar todos os modelos
__all__ = [
    # Base
    "Base",
    "AuditMixin",

    # Identidade e workspaces
    "User",
    "Workspace",
    "UserWorkspace",

    # Modelos de autorização
    "Permission",
    "UserWorkspacePermission",
    "ImpersonationSession",
]
