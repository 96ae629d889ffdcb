from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from docnotes.api.http.documents import to_envelope
from docnotes.api.http.notes import to_note_response
from docnotes.core.db import get_db
from docnotes.domains.documents.schemas import DocumentEnvelope
from docnotes.domains.documents.services import DocumentService
from docnotes.domains.identity.schemas import UserPublic
from docnotes.domains.notes.schemas import NoteEnvelope, PublicProfileResponse
from docnotes.domains.notes.services import NoteService
from docnotes.infrastructure.storage.blob_store import BlobStore, get_blob_store

# Без аутентификации, только опубликованное
router = APIRouter(prefix="/public", tags=["public"])


@router.get("/documents/{document_id}", response_model=DocumentEnvelope)
async def get_public_document(
    document_id: uuid.UUID,
    db: AsyncSession = Depends(get_db)
):
    """Опубликованный документ"""
    document_service = DocumentService(db)
    document = await document_service.get_public_document(document_id)
    return to_envelope(document)


@router.get("/notes/{note_id}", response_model=NoteEnvelope)
async def get_public_note(
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Опубликованная заметка"""
    note_service = NoteService(db, blob_store)
    note = await note_service.get_public_note(note_id)
    return NoteEnvelope(note=to_note_response(note, note_service))


@router.get("/users/{nickname}", response_model=PublicProfileResponse)
async def get_public_profile(
    nickname: str,
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Профиль пользователя с его опубликованными заметками"""
    note_service = NoteService(db, blob_store)
    user, notes = await note_service.get_public_profile(nickname)

    return PublicProfileResponse(
        user=UserPublic.model_validate(user),
        notes=[to_note_response(note, note_service) for note in notes]
    )
