# workspace_rbac/main.py

"""
FastAPI application entry point.

Run with:
    uvicorn workspace_rbac.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi_pagination import add_pagination

from workspace_rbac.adapters.configuration.config import settings
from workspace_rbac.adapters.inbound.api.v1.router import api_router
from workspace_rbac.adapters.outbound.persistence.models.base_model import register_all_events
from workspace_rbac.shared.middleware import AsyncRequestLoggingMiddleware, ErrorHandlerMiddleware

# Logging configurado uma única vez, a partir de LOG_LEVEL
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Eventos ORM (created_at / updated_at)
register_all_events()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.SCHEMA_VISIBILITY else None,
    redoc_url="/redoc" if settings.SCHEMA_VISIBILITY else None,
    openapi_url="/openapi.json" if settings.SCHEMA_VISIBILITY else None,
)

# A última middleware adicionada é a mais externa
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(AsyncRequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")
add_pagination(app)


@app.get("/", tags=["Health"])
async def root():
    return {"name": settings.PROJECT_NAME, "version": settings.VERSION, "environment": settings.ENVIRONMENT}


logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started ({settings.ENVIRONMENT})")
