from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from docnotes.core.auth import get_current_user
from docnotes.core.db import get_db
from docnotes.domains.documents.schemas import DocumentSummary
from docnotes.domains.identity.entities import User
from docnotes.domains.identity.schemas import UserPublic, UserSearchResponse
from docnotes.domains.search.services import SearchService

router = APIRouter(prefix="/users", tags=["users"])


class UserDocumentsResponse(BaseModel):
    user: UserPublic
    documents: List[DocumentSummary]


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    nickname: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Поиск пользователей по никнейму (без текущего пользователя)"""
    search_service = SearchService(db)
    users = await search_service.search_users(nickname, current_user.id)
    return UserSearchResponse(users=[UserPublic.model_validate(user) for user in users])


@router.get("/{nickname}/documents", response_model=UserDocumentsResponse)
async def get_user_documents(
    nickname: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Публичные документы пользователя и документы, которыми он поделился с текущим"""
    search_service = SearchService(db)
    owner, documents = await search_service.user_documents(nickname, current_user.id)

    return UserDocumentsResponse(
        user=UserPublic.model_validate(owner),
        documents=[DocumentSummary.model_validate(doc) for doc in documents]
    )
