"""
Note Service.

Business logic layer for notes. Validates input, applies defaults and
partial updates, and maps entities to response schemas.

Every validation runs before the repository is touched, so a rejected
call leaves storage unchanged.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import InvalidNoteDataError, NoteNotFoundError
from modules.backend.core.pagination import PagedResult, PaginationParams
from modules.backend.models.note import Note
from modules.backend.repositories.note import NoteRepository
from modules.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from modules.backend.services.base import BaseService

TITLE_MAX_LENGTH = 255


def to_response(note: Note) -> NoteResponse:
    return NoteResponse.model_validate(note)


class NoteService(BaseService):
    """
    Service for note business logic.

    All operations take the owner's id explicitly and only ever see that
    owner's active notes.
    """

    validation_error = InvalidNoteDataError

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    def _clean_title(self, title: str | None) -> str:
        """Trim and check a title. Raises InvalidNoteDataError if blank or too long."""
        trimmed = title.strip() if title is not None else ""
        if not trimmed:
            raise InvalidNoteDataError(
                "Title is required and cannot be empty",
                details={"field": "title"},
            )
        self._validate_string_length(trimmed, "title", max_length=TITLE_MAX_LENGTH)
        return trimmed

    async def _get_active_note(self, note_id: str, user_id: str) -> Note:
        note = await self.repo.find_active_by_id_and_user(note_id, user_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    async def create_note(self, data: NoteCreate | None, user_id: str | None) -> NoteResponse:
        """
        Create a note owned by user_id.

        The owner always comes from the caller. New notes are never deleted,
        and pinned/archived default to false.

        Raises:
            InvalidNoteDataError: If data or user_id is missing, or the title
                is blank or longer than 255 characters after trimming
        """
        self._validate_required({"data": data, "user_id": user_id}, ["data", "user_id"])
        title = self._clean_title(data.title)

        note = Note(
            title=title,
            content=data.content,
            tags=set(data.tags or ()),
            pinned=bool(data.pinned),
            archived=bool(data.archived),
            deleted=False,
            user_id=user_id,
        )

        self._log_operation("Creating note", user_id=user_id)
        note = await self._execute_db_operation("create_note", self.repo.save(note))
        self._log_debug("Note created", note_id=note.id)
        return to_response(note)

    async def get_all_notes(
        self,
        user_id: str | None,
        params: PaginationParams,
    ) -> PagedResult[NoteResponse]:
        """
        List the user's active notes.

        Raises:
            InvalidNoteDataError: If user_id is missing or the sort field is unsupported
        """
        self._validate_required({"user_id": user_id}, ["user_id"])
        page = await self._execute_db_operation(
            "get_all_notes",
            self.repo.find_active_by_user(user_id, params),
        )
        return page.map(to_response)

    async def get_note_by_id(self, note_id: str | None, user_id: str | None) -> NoteResponse:
        """
        Get one active note.

        Raises:
            InvalidNoteDataError: If note_id or user_id is missing
            NoteNotFoundError: If no active note with that id belongs to user_id
        """
        self._validate_required({"note_id": note_id, "user_id": user_id}, ["note_id", "user_id"])
        return to_response(await self._get_active_note(note_id, user_id))

    async def update_note(
        self,
        note_id: str | None,
        data: NoteUpdate | None,
        user_id: str | None,
    ) -> NoteResponse:
        """
        Apply a partial update.

        Only fields present and non-null in ``data`` change. A present title
        is trimmed and must not be blank. Present tags replace the stored set.

        Raises:
            InvalidNoteDataError: If an argument is missing or the title is invalid
            NoteNotFoundError: If no active note with that id belongs to user_id
        """
        self._validate_required(
            {"note_id": note_id, "data": data, "user_id": user_id},
            ["note_id", "data", "user_id"],
        )
        note = await self._get_active_note(note_id, user_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "title" in changes:
            changes["title"] = self._clean_title(changes["title"])
        if "tags" in changes:
            changes["tags"] = set(changes["tags"])

        self._log_operation("Updating note", note_id=note_id, fields=sorted(changes))
        for field, value in changes.items():
            setattr(note, field, value)

        note = await self._execute_db_operation("update_note", self.repo.save(note))
        return to_response(note)

    async def delete_note(self, note_id: str | None, user_id: str | None) -> None:
        """
        Soft-delete a note. A deleted note cannot be read, changed or deleted again.

        Raises:
            InvalidNoteDataError: If note_id or user_id is missing
            NoteNotFoundError: If no active note with that id belongs to user_id
        """
        self._validate_required({"note_id": note_id, "user_id": user_id}, ["note_id", "user_id"])
        note = await self._get_active_note(note_id, user_id)

        self._log_operation("Deleting note", note_id=note_id)
        note.deleted = True
        await self._execute_db_operation("delete_note", self.repo.save(note))

    async def search_notes(
        self,
        query: str | None,
        user_id: str | None,
        params: PaginationParams,
    ) -> PagedResult[NoteResponse]:
        """
        Search the user's active notes by title or content.

        A missing or blank query returns the same result as get_all_notes.

        Raises:
            InvalidNoteDataError: If user_id is missing
        """
        self._validate_required({"user_id": user_id}, ["user_id"])
        if query is None or not query.strip():
            return await self.get_all_notes(user_id, params)

        term = query.strip()
        self._log_debug("Searching notes", query=term)
        page = await self._execute_db_operation(
            "search_notes",
            self.repo.search_active(term, user_id, params),
        )
        return page.map(to_response)
