"""Pydantic schemas for API requests and responses."""

from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.note import FormUpdate, Note, NoteForm, NoteList, NoteStats, QueryUpdate, SessionView

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "Note",
    "NoteForm",
    "NoteList",
    "NoteStats",
    "QueryUpdate",
    "FormUpdate",
    "SessionView",
]
