"""
Notes API Endpoints.

REST API endpoints for note management. Every endpoint acts on the notes
of the current user (see get_current_user_id).
"""

from typing import Any

from fastapi import APIRouter, Query, Response

from modules.backend.core.dependencies import (
    CurrentUserId,
    DbSession,
    Pagination,
    RequestId,
    SearchPagination,
)
from modules.backend.core.pagination import create_paginated_response
from modules.backend.schemas.base import ApiResponse, PaginatedResponse, ResponseMetadata
from modules.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from modules.backend.services.note import NoteService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note with a title and optional content, tags and flags.",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    note = await NoteService(db).create_note(data, user_id)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "",
    response_model=PaginatedResponse[NoteResponse],
    summary="List notes (paginated)",
    description=(
        "List active notes, most recently updated first by default. "
        "`sort` accepts a field name or the combined `field,direction` form."
    ),
)
async def list_notes(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
    pagination: Pagination,
) -> dict[str, Any]:
    """List notes with page-number pagination."""
    page = await NoteService(db).get_all_notes(user_id, pagination)
    return create_paginated_response(page, NoteResponse, request_id=request_id)


@router.get(
    "/search",
    response_model=PaginatedResponse[NoteResponse],
    summary="Search notes",
    description=(
        "Case-insensitive substring search over title and content. "
        "A blank query lists all active notes."
    ),
)
async def search_notes(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
    pagination: SearchPagination,
    q: str | None = Query(default=None, description="Search text"),
) -> dict[str, Any]:
    """Search notes by title or content."""
    page = await NoteService(db).search_notes(q, user_id, pagination)
    return create_paginated_response(page, NoteResponse, request_id=request_id)


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single active note by ID.",
)
async def get_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    note = await NoteService(db).get_note_by_id(note_id, user_id)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update a note. Only provided, non-null fields change.",
)
@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Partially update a note",
    description="Update a note. Only provided, non-null fields change.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    note = await NoteService(db).update_note(note_id, data, user_id)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.delete(
    "/{note_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a note",
    description="Soft-delete a note. It disappears from every read and cannot be restored.",
)
async def delete_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
) -> Response:
    """Delete a note."""
    await NoteService(db).delete_note(note_id, user_id)
    return Response(status_code=204)
