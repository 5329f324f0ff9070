"""
Note Repository.

Data access layer for notes. Every query is scoped to one owner and to
active (not soft-deleted) notes.
"""

from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import InvalidNoteDataError
from modules.backend.core.pagination import PagedResult, PaginationParams
from modules.backend.models.note import Note
from modules.backend.repositories.base import BaseRepository

SORTABLE_COLUMNS = {
    "title": Note.title,
    "created_at": Note.created_at,
    "createdAt": Note.created_at,
    "updated_at": Note.updated_at,
    "updatedAt": Note.updated_at,
    "pinned": Note.pinned,
    "archived": Note.archived,
}


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Deleted notes and other users' notes are invisible to every method.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    @staticmethod
    def _active_for_user(user_id: str) -> Select[Any]:
        """Base select limited to the owner's active notes."""
        return select(Note).where(
            Note.user_id == user_id,
            Note.deleted.is_(False),
        )

    @staticmethod
    def _ordered(stmt: Select[Any], params: PaginationParams) -> Select[Any]:
        """
        Apply the requested sort, with id as tie-breaker.

        Raises:
            InvalidNoteDataError: If the sort field is not sortable
        """
        column = SORTABLE_COLUMNS.get(params.sort_field)
        if column is None:
            raise InvalidNoteDataError(
                f"Unsupported sort field: {params.sort_field}",
                details={"field": "sort", "allowed": sorted(SORTABLE_COLUMNS)},
            )
        if params.descending:
            return stmt.order_by(column.desc(), Note.id.desc())
        return stmt.order_by(column.asc(), Note.id.asc())

    async def find_active_by_user(
        self,
        user_id: str,
        params: PaginationParams,
    ) -> PagedResult[Note]:
        """
        Get one page of the user's active notes.

        Args:
            user_id: Owner identifier
            params: Page, size and sort

        Returns:
            Page of notes, default order most recently updated first
        """
        stmt = self._ordered(self._active_for_user(user_id), params)
        return await self._fetch_page(stmt, params)

    async def find_active_by_id_and_user(self, note_id: str, user_id: str) -> Note | None:
        """Get the note if it exists, is active and belongs to user_id."""
        result = await self.session.execute(
            self._active_for_user(user_id).where(Note.id == note_id)
        )
        return result.scalar_one_or_none()

    async def search_active(
        self,
        query: str,
        user_id: str,
        params: PaginationParams,
    ) -> PagedResult[Note]:
        """
        Search the user's active notes by title or content.

        Matching is a case-insensitive substring test. ``%`` and ``_`` in
        the query match literally.

        Args:
            query: Non-blank search text
            user_id: Owner identifier
            params: Page, size and sort

        Returns:
            Page of matching notes
        """
        term = query.strip()
        stmt = self._active_for_user(user_id).where(
            or_(
                Note.title.icontains(term, autoescape=True),
                Note.content.icontains(term, autoescape=True),
            )
        )
        return await self._fetch_page(self._ordered(stmt, params), params)

    async def count_active_by_user(self, user_id: str) -> int:
        """Count the user's active notes."""
        result = await self.session.execute(
            select(func.count()).select_from(self._active_for_user(user_id).subquery())
        )
        return result.scalar_one()
