from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid

from docnotes.db.models.note import Note as NoteModel
from docnotes.domains.notes.entities import Note


class NoteRepository:
    """Репозиторий простых заметок"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, note: Note) -> Note:
        db_note = NoteModel(
            id=note.id,
            owner_id=note.owner_id,
            title=note.title,
            content=note.content,
            image_path=note.image_path,
            is_public=note.is_public
        )

        self.session.add(db_note)
        await self.session.commit()
        await self.session.refresh(db_note)
        return self._to_domain(db_note)

    async def get_public(self, note_id: uuid.UUID) -> Optional[Note]:
        result = await self.session.execute(
            select(NoteModel).where(NoteModel.id == note_id, NoteModel.is_public.is_(True))
        )
        db_note = result.scalar_one_or_none()
        return self._to_domain(db_note) if db_note else None

    async def get_by_owner(self, owner_id: uuid.UUID, public_only: bool = False) -> List[Note]:
        stmt = select(NoteModel).where(NoteModel.owner_id == owner_id)
        if public_only:
            stmt = stmt.where(NoteModel.is_public.is_(True))

        result = await self.session.execute(stmt.order_by(NoteModel.created_at.desc()))
        return [self._to_domain(note) for note in result.scalars().all()]

    def _to_domain(self, db_note: NoteModel) -> Note:
        return Note(
            id=db_note.id,
            owner_id=db_note.owner_id,
            title=db_note.title,
            content=db_note.content,
            image_path=db_note.image_path,
            is_public=db_note.is_public,
            created_at=db_note.created_at,
            updated_at=db_note.updated_at
        )
