from docnotes.db.repositories.user_repository import UserRepository
from docnotes.db.repositories.document_repository import DocumentRepository
from docnotes.db.repositories.share_repository import ShareRepository
from docnotes.db.repositories.image_repository import ImageRepository
from docnotes.db.repositories.note_repository import NoteRepository

__all__ = [
    "UserRepository",
    "DocumentRepository",
    "ShareRepository",
    "ImageRepository",
    "NoteRepository"
]
