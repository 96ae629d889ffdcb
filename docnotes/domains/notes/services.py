from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from docnotes.core.errors import NotFoundError, upstream_guard
from docnotes.db.repositories.note_repository import NoteRepository
from docnotes.db.repositories.user_repository import UserRepository
from docnotes.domains.identity.entities import User
from docnotes.domains.notes.entities import Note
from docnotes.domains.notes.schemas import NoteCreate
from docnotes.infrastructure.storage.blob_store import BlobStore


class NoteService:
    """Простые заметки и публичные страницы пользователей"""

    def __init__(self, session: AsyncSession, blob_store: Optional[BlobStore] = None):
        self.session = session
        self.blob_store = blob_store
        self.note_repository = NoteRepository(session)
        self.user_repository = UserRepository(session)

    def image_url(self, note: Note) -> Optional[str]:
        if not note.image_path:
            return None
        if note.image_path.startswith(("http://", "https://", "/")) or self.blob_store is None:
            return note.image_path
        return self.blob_store.public_url(note.image_path)

    @upstream_guard("Failed to create note")
    async def create_note(self, note_data: NoteCreate, owner_id: uuid.UUID) -> Note:
        note = Note.create_note(
            owner_id=owner_id,
            title=note_data.title,
            content=note_data.content,
            image_path=note_data.image_path,
            is_public=note_data.is_public
        )
        return await self.note_repository.create(note)

    @upstream_guard("Failed to fetch notes")
    async def get_user_notes(self, owner_id: uuid.UUID) -> List[Note]:
        return await self.note_repository.get_by_owner(owner_id)

    @upstream_guard("Failed to fetch note")
    async def get_public_note(self, note_id: uuid.UUID) -> Note:
        note = await self.note_repository.get_public(note_id)
        if not note:
            raise NotFoundError("Note not found")
        return note

    @upstream_guard("Failed to fetch profile")
    async def get_public_profile(self, nickname: str) -> Tuple[User, List[Note]]:
        """Профиль пользователя и только его публичные заметки"""
        user = await self.user_repository.get_by_nickname(nickname)
        if not user:
            raise NotFoundError("User not found")

        notes = await self.note_repository.get_by_owner(user.id, public_only=True)
        return user, notes
