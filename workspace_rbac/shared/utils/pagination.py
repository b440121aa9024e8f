# workspace_rbac/shared/utils/pagination.py

from fastapi import Query
from fastapi_pagination import Params

# O catálogo completo cabe em uma página
CATALOG_PAGE_SIZE = 50
CATALOG_MAX_PAGE_SIZE = 100


def catalog_pagination_params(
        page: int = Query(1, ge=1, description="Page number"),
        size: int = Query(CATALOG_PAGE_SIZE, ge=1, le=CATALOG_MAX_PAGE_SIZE, description="Permissions per page"),
) -> Params:
    """Query parameters for paginated catalog listings."""
    return Params(page=page, size=size)
