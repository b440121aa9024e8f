# workspace_rbac/domain/exceptions.py

"""
Domain exceptions.

Every error the core raises on purpose derives from DomainException, which
carries the HTTP status and the internal code used by the error handler
middleware to render a uniform JSON body.
"""

from typing import Any, Optional


class DomainException(Exception):
    """Base exception for all domain errors."""

    status_code: int = 400
    internal_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "Domain error", details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ResourceNotFoundException(DomainException):
    """A referenced user, workspace, permission or session does not exist."""

    status_code = 404
    internal_code = "RESOURCE_NOT_FOUND"

    def __init__(self, message: str = "Resource not found", resource_id: Optional[Any] = None):
        super().__init__(message, details={"resource_id": str(resource_id)} if resource_id is not None else None)
        self.resource_id = resource_id


class ResourceAlreadyExistsException(DomainException):
    """The operation would duplicate something that must be unique."""

    status_code = 409
    internal_code = "RESOURCE_ALREADY_EXISTS"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message or detail or "Resource already exists")


class PermissionDeniedException(DomainException):
    """The acting principal lacks the capability for the requested operation."""

    status_code = 403
    internal_code = "PERMISSION_DENIED"

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class InvalidOperationException(DomainException):
    """The request violates a stated invariant (self-impersonation, second active session...)."""

    status_code = 400
    internal_code = "INVALID_OPERATION"


class ConcurrentModificationException(DomainException):
    """A read-modify-write kept losing against concurrent writers."""

    status_code = 409
    internal_code = "CONCURRENT_MODIFICATION"


class DatabaseOperationException(DomainException):
    """The underlying storage failed. The original error is kept for logging."""

    status_code = 500
    internal_code = "DATABASE_ERROR"

    def __init__(self, message: str = "Database operation failed", original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error
