"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.database import get_db_session
from modules.backend.core.pagination import (
    PaginationParams,
    get_pagination_params,
    get_search_pagination_params,
)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(
    request: Request,
    x_request_id: str | None = Header(None),
) -> str:
    """
    Return the request ID set by RequestContextMiddleware.

    Falls back to the X-Request-ID header, then to a fresh UUID.
    """
    return getattr(request.state, "request_id", None) or x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_current_user_id() -> str:
    """
    Resolve the owner of the current request.

    Returns the configured application.default_user_id. Replace this
    dependency (or override it in tests) to plug in real authentication.
    """
    return get_app_config().application.default_user_id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]

Pagination = Annotated[PaginationParams, Depends(get_pagination_params)]
SearchPagination = Annotated[PaginationParams, Depends(get_search_pagination_params)]
