# Database models package. Import every model here so Base.metadata is complete.
from modules.backend.models.base import Base
from modules.backend.models.note import Note, NoteTag

__all__ = ["Base", "Note", "NoteTag"]
