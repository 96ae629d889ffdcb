from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from docnotes.core.auth import get_current_user
from docnotes.core.db import get_db
from docnotes.domains.documents.schemas import (
    ShareRequest, ShareResponse, ShareEnvelope, ShareListResponse, SuccessResponse
)
from docnotes.domains.identity.entities import User
from docnotes.domains.sharing.services import ShareService

router = APIRouter(prefix="/documents/{document_id}", tags=["sharing"])


@router.post("/share", response_model=ShareEnvelope)
async def share_document(
    document_id: uuid.UUID,
    share_data: ShareRequest,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Выдача доступа по никнейму; повторный вызов меняет can_edit"""
    share_service = ShareService(db)
    share, created = await share_service.grant_or_update(
        document_id,
        current_user.id,
        share_data.viewer_nickname,
        share_data.can_edit
    )

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ShareEnvelope(share=ShareResponse.model_validate(share))


@router.delete("/share", response_model=SuccessResponse)
async def revoke_share(
    document_id: uuid.UUID,
    viewer_nickname: Optional[str] = Query(None, alias="viewerNickname"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Отзыв доступа"""
    share_service = ShareService(db)
    await share_service.revoke(document_id, current_user.id, viewer_nickname)
    return SuccessResponse()


@router.get("/shares", response_model=ShareListResponse)
async def list_shares(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Список соавторов документа (только владелец)"""
    share_service = ShareService(db)
    shares = await share_service.list_shares(document_id, current_user.id)
    return ShareListResponse(shares=[ShareResponse.model_validate(share) for share in shares])
