from docnotes.domains.notes.entities import Note
from docnotes.domains.notes.schemas import (
    NoteCreate, NoteResponse, NoteEnvelope, NoteListResponse, PublicProfileResponse
)

__all__ = [
    "Note",
    "NoteCreate", "NoteResponse", "NoteEnvelope", "NoteListResponse", "PublicProfileResponse"
]
