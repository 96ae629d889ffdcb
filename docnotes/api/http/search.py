from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from docnotes.core.auth import get_current_user
from docnotes.core.db import get_db
from docnotes.domains.documents.schemas import DocumentSearchResponse, DocumentSummary
from docnotes.domains.identity.entities import User
from docnotes.domains.search.services import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=DocumentSearchResponse)
async def search_documents(
    q: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Поиск по названию и тексту: свои, доступные и чужие опубликованные документы"""
    search_service = SearchService(db)
    documents = await search_service.search(current_user.id, q)

    return DocumentSearchResponse(
        documents=[DocumentSummary.model_validate(doc) for doc in documents],
        query=q
    )
