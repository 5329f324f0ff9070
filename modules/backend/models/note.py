"""
Note Model.

The note entity and its tag rows.
"""

from collections.abc import Iterable

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    A note is active while ``deleted`` is false. Deleted notes stay in the
    table and are filtered out by every repository query.

    Tags are exposed as a set through the ``tags`` property and stored one
    row per tag in ``note_tags``.
    """

    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_user_deleted_updated", "user_id", "deleted", "updated_at"),
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    pinned: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    archived: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    deleted: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
    )

    tag_rows: Mapped[list["NoteTag"]] = relationship(
        back_populates="note",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="NoteTag.tag",
    )

    @property
    def tags(self) -> set[str]:
        return {row.tag for row in self.tag_rows}

    @tags.setter
    def tags(self, values: Iterable[str]) -> None:
        # Keep rows for tags that survive so the unique (note_id, tag) pair is never re-inserted
        existing = {row.tag: row for row in self.tag_rows}
        self.tag_rows = [existing.get(tag) or NoteTag(tag=tag) for tag in sorted(set(values))]

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, deleted={self.deleted})>"


class NoteTag(Base):
    """One tag attached to a note."""

    __tablename__ = "note_tags"
    __table_args__ = (
        UniqueConstraint("note_id", "tag", name="uq_note_tags_note_id_tag"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag: Mapped[str] = mapped_column(String(100), nullable=False)

    note: Mapped[Note] = relationship(back_populates="tag_rows")

    def __repr__(self) -> str:
        return f"<NoteTag(note_id={self.note_id}, tag={self.tag!r})>"
