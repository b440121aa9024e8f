# workspace_rbac/shared/middleware/error_handler_middleware.py

"""
Uniform error bodies.

Domain exceptions carry their own HTTP status and code; everything else is
mapped here. The body is always {"success": false, "error", "code",
"details"}.
"""

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from workspace_rbac.domain.exceptions import DatabaseOperationException, DomainException

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, code: str, details: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "code": code, "details": details},
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)

        # falha de armazenamento: o erro original só vai para o log
        except DatabaseOperationException as e:
            logger.error(f"[{e.internal_code}] {request.method} {request.url.path}: {e.message} ({e.original_error})")
            return error_response(e.status_code, e.message, e.internal_code)

        except DomainException as e:
            logger.warning(f"[{e.internal_code}] {request.method} {request.url.path}: {e.message}")
            return error_response(e.status_code, e.message, e.internal_code, e.details)

        except RequestValidationError as e:
            logger.warning(f"Validation error on {request.url.path}")
            return error_response(422, "Erro de validação nos dados enviados.", "VALIDATION_ERROR", e.errors())

        except HTTPException as e:
            logger.warning(f"HTTP {e.status_code} on {request.url.path}: {e.detail}")
            return error_response(e.status_code, str(e.detail), "HTTP_EXCEPTION")

        except Exception:
            logger.exception(f"Erro inesperado em {request.method} {request.url.path}")
            return error_response(500, "Erro interno do servidor.", "INTERNAL_SERVER_ERROR")
