from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from docnotes.core.auth import get_current_user
from docnotes.core.db import get_db
from docnotes.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentEnvelope,
    DocumentListResponse, DocumentSummary, SuccessResponse
)
from docnotes.domains.documents.services import DocumentService
from docnotes.domains.identity.entities import User
from docnotes.domains.search.services import SearchService
from docnotes.infrastructure.storage.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/documents", tags=["documents"])


def to_envelope(document) -> DocumentEnvelope:
    return DocumentEnvelope(document=DocumentResponse.model_validate(document))


@router.get("", response_model=DocumentListResponse)
async def get_user_documents(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Свои и доступные пользователю документы"""
    search_service = SearchService(db)
    documents = await search_service.list_visible(current_user.id)

    return DocumentListResponse(
        documents=[DocumentSummary.model_validate(doc) for doc in documents]
    )


@router.post("", response_model=DocumentEnvelope, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа"""
    document_service = DocumentService(db)
    document = await document_service.create_document(document_data, current_user.id)
    return to_envelope(document)


@router.get("/{document_id}", response_model=DocumentEnvelope)
async def get_document(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Получение документа по id"""
    document_service = DocumentService(db)
    document = await document_service.get_document(document_id, current_user.id)
    return to_envelope(document)


@router.patch("/{document_id}", response_model=DocumentEnvelope)
async def update_document(
    document_id: uuid.UUID,
    update_data: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Обновление документа; version в теле - версия, которую видел клиент"""
    document_service = DocumentService(db)
    document = await document_service.update_document(document_id, update_data, current_user.id)
    return to_envelope(document)


@router.delete("/{document_id}", response_model=SuccessResponse)
async def delete_document(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Удаление документа (только владелец)"""
    document_service = DocumentService(db, blob_store)
    await document_service.delete_document(document_id, current_user.id)
    return SuccessResponse()
