"""
Note Schemas.

Pydantic schemas for note API request/response validation.

Title rules (required on create, non-blank, at most 255 characters after
trimming) are enforced by NoteService so that direct service callers and
HTTP callers get the same error.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

Tag = Annotated[str, Field(max_length=100)]


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str | None = Field(
        default=None,
        description="Note title, required",
        examples=["Shopping"],
    )
    content: str | None = Field(
        default=None,
        description="Note body, markdown by convention",
        examples=["milk, eggs"],
    )
    tags: list[Tag] | None = Field(
        default=None,
        description="Tags; duplicates collapse",
        examples=[["home"]],
    )
    pinned: bool | None = Field(default=None, description="Pin status")
    archived: bool | None = Field(default=None, description="Archive status")


class NoteUpdate(BaseModel):
    """
    Schema for a partial note update.

    Only fields that are present and non-null are applied. ``tags``
    replaces the stored set.
    """

    title: str | None = Field(default=None, description="Note title")
    content: str | None = Field(default=None, description="Note body")
    tags: list[Tag] | None = Field(default=None, description="Replacement tag set")
    pinned: bool | None = Field(default=None, description="Pin status")
    archived: bool | None = Field(default=None, description="Archive status")


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str | None = Field(description="Note body")
    tags: list[str] = Field(description="Tags, sorted")
    pinned: bool = Field(description="Whether the note is pinned")
    archived: bool = Field(description="Whether the note is archived")
    user_id: str = Field(description="Owner identifier")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", mode="before")
    @classmethod
    def sort_tags(cls, value: object) -> object:
        if isinstance(value, (set, frozenset, list, tuple)):
            return sorted(set(value))
        return value
