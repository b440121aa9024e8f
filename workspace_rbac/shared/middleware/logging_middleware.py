# workspace_rbac/shared/middleware/logging_middleware.py

"""
Request logging.

Every request gets an id (taken from X-Request-Id or generated) that is
echoed back in the response and prefixed to both log lines, so the
warnings emitted by the services in between can be matched to a call.
"""

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from workspace_rbac.adapters.configuration.config import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"
# Acima disso a resposta é registrada como warning
SLOW_REQUEST_SECONDS = 1.0


class AsyncRequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"

        if settings.ENVIRONMENT == "production":
            logger.info(f"[{request_id}] -> {route}")
        else:
            logger.info(
                f"[{request_id}] -> {route} | "
                f"workspace={request.headers.get('x-workspace-id', '-')} | "
                f"auth={'bearer' if request.headers.get('authorization') else 'none'} | "
                f"client={request.client.host if request.client else '-'}"
            )

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        response.headers[REQUEST_ID_HEADER] = request_id
        line = f"[{request_id}] <- {response.status_code} {route} in {elapsed:.3f}s"
        if elapsed > SLOW_REQUEST_SECONDS:
            logger.warning(f"{line} (slow)")
        else:
            logger.info(line)

        return response
