"""
Pagination Utilities.

Page-number pagination for list endpoints. Pages are zero-based; the
requested page size is capped by ``pagination.max_size`` in application.yaml.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel

from modules.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_SORT_FIELD = "updated_at"
DEFAULT_SORT_DIRECTION = "desc"


# =============================================================================
# Pagination Parameters
# =============================================================================


def normalize_direction(direction: str | None) -> str:
    """Return 'asc' or 'desc'. Anything other than 'asc' means descending."""
    if direction is not None and direction.strip().lower() == "asc":
        return "asc"
    return "desc"


@dataclass
class PaginationParams:
    """
    Pagination and sort parameters.

    The sort field is kept as given; repositories map it onto a column and
    reject names they do not support.
    """

    page: int = 0
    size: int = 10
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = DEFAULT_SORT_DIRECTION

    def __post_init__(self) -> None:
        self.sort_direction = normalize_direction(self.sort_direction)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def descending(self) -> bool:
        return self.sort_direction == "desc"


def parse_sort(sort: str | None, direction: str | None = None) -> tuple[str, str]:
    """
    Split a sort expression into (field, direction).

    Accepts a bare field name or the combined ``field,direction`` form.
    A direction inside ``sort`` wins over the separate ``direction`` value.

    Examples:
        parse_sort("updatedAt,desc") -> ("updatedAt", "desc")
        parse_sort("title", "ASC")   -> ("title", "asc")
        parse_sort(None)             -> ("updated_at", "desc")
    """
    if not sort or not sort.strip():
        return DEFAULT_SORT_FIELD, normalize_direction(direction)

    field, _, inline_direction = sort.partition(",")
    if inline_direction.strip():
        direction = inline_direction
    return field.strip() or DEFAULT_SORT_FIELD, normalize_direction(direction)


def _resolve_size(size: int | None) -> int:
    from modules.backend.core.config import get_app_config

    limits = get_app_config().application.pagination
    if size is None:
        return limits.default_size
    return min(size, limits.max_size)


def get_pagination_params(
    page: int = Query(
        default=0,
        ge=0,
        description="Zero-based page index",
    ),
    size: int | None = Query(
        default=None,
        ge=1,
        description="Page size (defaults to pagination.default_size, capped at pagination.max_size)",
    ),
    sort: str | None = Query(
        default=None,
        description="Sort field, optionally with direction: 'title' or 'updatedAt,desc'",
    ),
    direction: str | None = Query(
        default=None,
        description="Sort direction: 'asc' or 'desc'",
    ),
) -> PaginationParams:
    """
    FastAPI dependency for list pagination and sorting.

    Usage:
        @router.get("/notes")
        async def list_notes(
            pagination: PaginationParams = Depends(get_pagination_params),
        ):
            ...
    """
    sort_field, sort_direction = parse_sort(sort, direction)
    return PaginationParams(
        page=page,
        size=_resolve_size(size),
        sort_field=sort_field,
        sort_direction=sort_direction,
    )


def get_search_pagination_params(
    page: int = Query(default=0, ge=0, description="Zero-based page index"),
    size: int | None = Query(default=None, ge=1, description="Page size"),
) -> PaginationParams:
    """Pagination for search endpoints. Results are always newest-updated first."""
    return PaginationParams(page=page, size=_resolve_size(size))


# =============================================================================
# Paginated Result
# =============================================================================


@dataclass
class PagedResult(Generic[T]):
    """
    One page of query results plus the metadata needed to build
    a PaginatedResponse.
    """

    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total / self.size)

    @property
    def has_more(self) -> bool:
        return (self.page + 1) * self.size < self.total

    def map(self, fn: Callable[[T], U]) -> "PagedResult[U]":
        """Convert every item, keeping the page metadata."""
        return PagedResult(
            items=[fn(item) for item in self.items],
            total=self.total,
            page=self.page,
            size=self.size,
        )


def create_paginated_response(
    result: PagedResult[Any],
    item_schema: type[BaseModel],
    request_id: str | None = None,
) -> dict[str, Any]:
    """
    Create a standardized paginated response.

    Args:
        result: Page of items (model instances, schemas or dicts)
        item_schema: Pydantic schema to validate items
        request_id: Request ID for metadata

    Returns:
        Dict matching PaginatedResponse structure
    """
    validated_items = [
        item_schema.model_validate(item).model_dump(mode="json")
        for item in result.items
    ]

    pagination = PaginationInfo(
        total=result.total,
        page=result.page,
        size=result.size,
        total_pages=result.total_pages,
        has_more=result.has_more,
    )

    response = PaginatedResponse(
        data=validated_items,
        pagination=pagination,
        metadata=ResponseMetadata(request_id=request_id),
    )

    return response.model_dump(mode="json")
