"""
Base Repository.

Base class for all repositories with shared persistence helpers.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.logging import get_logger
from modules.backend.core.pagination import PagedResult, PaginationParams
from modules.backend.core.utils import utc_now
from modules.backend.models.base import Base, TimestampMixin, new_uuid

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with shared persistence helpers.

    Lookups are left to subclasses so that every query can carry its own
    scoping rules. Subclasses should set the model class:

        class NoteRepository(BaseRepository[Note]):
            model = Note
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, instance: ModelType) -> ModelType:
        """
        Insert or update a record.

        Assigns a missing id, stamps created_at on first save and refreshes
        updated_at on every save. A first save stamps both timestamps with
        the same instant.
        """
        if getattr(instance, "id", None) is None and hasattr(instance, "id"):
            instance.id = new_uuid()

        if isinstance(instance, TimestampMixin):
            now = utc_now()
            if instance.created_at is None:
                instance.created_at = now
            instance.updated_at = now

        self.session.add(instance)
        await self.session.flush()
        return instance

    async def _fetch_page(
        self,
        stmt: Select[Any],
        params: PaginationParams,
    ) -> PagedResult[ModelType]:
        """Run a filtered, ordered select as one page plus a total count."""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = (await self.session.execute(count_stmt)).scalar_one()

        result = await self.session.execute(
            stmt.offset(params.offset).limit(params.size)
        )
        items = list(result.scalars().all())

        logger.debug(
            "Fetched page",
            extra={
                "model": self.model.__name__,
                "page": params.page,
                "size": params.size,
                "returned": len(items),
                "total": total,
            },
        )
        return PagedResult(items=items, total=total, page=params.page, size=params.size)
