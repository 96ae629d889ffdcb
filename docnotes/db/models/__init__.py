from docnotes.db.models.user import User
from docnotes.db.models.document import Document, DocumentShare, Image
from docnotes.db.models.note import Note

__all__ = [
    "User",
    "Document",
    "DocumentShare",
    "Image",
    "Note"
]
