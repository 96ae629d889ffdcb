from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from docnotes.core.auth import get_current_user
from docnotes.core.db import get_db
from docnotes.domains.identity.entities import User
from docnotes.domains.notes.entities import Note
from docnotes.domains.notes.schemas import NoteCreate, NoteResponse, NoteEnvelope, NoteListResponse
from docnotes.domains.notes.services import NoteService
from docnotes.infrastructure.storage.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/notes", tags=["notes"])


def to_note_response(note: Note, note_service: NoteService) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        owner_id=note.owner_id,
        title=note.title,
        content=note.content,
        image_url=note_service.image_url(note),
        is_public=note.is_public,
        created_at=note.created_at
    )


@router.post("", response_model=NoteEnvelope, status_code=status.HTTP_201_CREATED)
async def create_note(
    note_data: NoteCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Создание простой заметки"""
    note_service = NoteService(db, blob_store)
    note = await note_service.create_note(note_data, current_user.id)
    return NoteEnvelope(note=to_note_response(note, note_service))


@router.get("", response_model=NoteListResponse)
async def get_notes(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Заметки текущего пользователя"""
    note_service = NoteService(db, blob_store)
    notes = await note_service.get_user_notes(current_user.id)
    return NoteListResponse(notes=[to_note_response(note, note_service) for note in notes])
