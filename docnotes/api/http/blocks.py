from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from docnotes.api.http.documents import to_envelope
from docnotes.core.auth import get_current_user
from docnotes.core.db import get_db
from docnotes.domains.documents.schemas import (
    BlockInsertRequest, BlockUpdateRequest, BlockMoveRequest, BlockEnvelope,
    DocumentEnvelope, DocumentResponse, ImageAssetResponse, ImageUploadResponse
)
from docnotes.domains.documents.services import DocumentService
from docnotes.domains.identity.entities import User
from docnotes.infrastructure.storage.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/documents/{document_id}/blocks", tags=["blocks"])


@router.post("", response_model=BlockEnvelope, status_code=status.HTTP_201_CREATED)
async def insert_block(
    document_id: uuid.UUID,
    block_data: BlockInsertRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Добавление блока (по умолчанию в конец)"""
    document_service = DocumentService(db)
    document, block = await document_service.insert_block(
        document_id,
        current_user.id,
        block_data.type,
        at_index=block_data.index,
        expected_version=block_data.version
    )
    return BlockEnvelope(document=DocumentResponse.model_validate(document), block=block)


@router.post("/move", response_model=DocumentEnvelope)
async def move_block(
    document_id: uuid.UUID,
    move_data: BlockMoveRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Перенос блока с позиции from_index на to_index"""
    document_service = DocumentService(db)
    document = await document_service.move_block(
        document_id,
        current_user.id,
        move_data.from_index,
        move_data.to_index,
        expected_version=move_data.version
    )
    return to_envelope(document)


@router.patch("/{block_id}", response_model=DocumentEnvelope)
async def update_block(
    document_id: uuid.UUID,
    block_id: str,
    block_data: BlockUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    document_service = DocumentService(db)
    document = await document_service.update_block(
        document_id,
        current_user.id,
        block_id,
        block_data.block_fields(),
        expected_version=block_data.version
    )
    return to_envelope(document)


@router.delete("/{block_id}", response_model=DocumentEnvelope)
async def delete_block(
    document_id: uuid.UUID,
    block_id: str,
    version: Optional[int] = Query(None, ge=1),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    document_service = DocumentService(db)
    document = await document_service.delete_block(
        document_id,
        current_user.id,
        block_id,
        expected_version=version
    )
    return to_envelope(document)


@router.post("/{block_id}/image", response_model=ImageUploadResponse)
async def upload_block_image(
    document_id: uuid.UUID,
    block_id: str,
    file: UploadFile = File(...),
    version: Optional[int] = Form(None, ge=1),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Загрузка изображения в блок"""
    document_service = DocumentService(db, blob_store)
    data = await file.read()

    document, image, url = await document_service.attach_image(
        document_id,
        current_user.id,
        block_id,
        filename=file.filename or "image",
        content_type=file.content_type or "",
        data=data,
        expected_version=version
    )

    return ImageUploadResponse(
        document=DocumentResponse.model_validate(document),
        image=ImageAssetResponse(
            id=image.id,
            document_id=image.document_id,
            storage_path=image.storage_path,
            url=url,
            position=image.position,
            size=image.size
        )
    )
