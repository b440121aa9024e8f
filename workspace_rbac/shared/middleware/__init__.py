# workspace_rbac/shared/middleware/__init__.py

from workspace_rbac.shared.middleware.logging_middleware import AsyncRequestLoggingMiddleware
from workspace_rbac.shared.middleware.error_handler_middleware import ErrorHandlerMiddleware

# Export all for easy imports
__all__ = [
    "AsyncRequestLoggingMiddleware",
    "ErrorHandlerMiddleware",
]
