from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from docnotes.core.errors import NotFoundError, ValidationFailedError, upstream_guard
from docnotes.db.repositories.document_repository import DocumentRepository
from docnotes.db.repositories.user_repository import UserRepository
from docnotes.domains.documents.entities import Document
from docnotes.domains.identity.entities import User

MIN_QUERY_LENGTH = 2
VISIBLE_POOL_LIMIT = 20
PUBLIC_POOL_LIMIT = 10
SEARCH_RESULT_LIMIT = 20
USER_SEARCH_LIMIT = 10


def validate_query(query: Optional[str], name: str = "Query") -> str:
    if not query:
        raise ValidationFailedError(f"{name} parameter is required")
    if len(query) < MIN_QUERY_LENGTH:
        raise ValidationFailedError(f"{name} must be at least {MIN_QUERY_LENGTH} characters")
    return query


def merge_unique(*pools: List[Document], limit: int) -> List[Document]:
    """Объединение пулов с удалением дублей по id; порядок пулов сохраняется"""
    seen = set()
    merged = []
    for pool in pools:
        for document in pool:
            if document.id not in seen:
                seen.add(document.id)
                merged.append(document)
    return merged[:limit]


class SearchService:
    """Списки и поиск: свои, доступные и опубликованные чужие документы"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.user_repository = UserRepository(session)

    @upstream_guard("Failed to fetch documents")
    async def list_visible(self, user_id: uuid.UUID) -> List[Document]:
        """Свои и доступные документы, сначала недавно измененные"""
        return await self.document_repository.get_visible(user_id)

    @upstream_guard("Failed to search documents")
    async def search(self, user_id: uuid.UUID, query: Optional[str]) -> List[Document]:
        query = validate_query(query)

        visible = await self.document_repository.search_visible(user_id, query, VISIBLE_POOL_LIMIT)
        public = await self.document_repository.search_public_of_others(user_id, query, PUBLIC_POOL_LIMIT)

        return merge_unique(visible, public, limit=SEARCH_RESULT_LIMIT)

    @upstream_guard("Failed to search users")
    async def search_users(self, query: Optional[str], exclude_user_id: uuid.UUID) -> List[User]:
        query = validate_query(query, name="Nickname")
        return await self.user_repository.search_by_nickname(query, exclude_user_id, USER_SEARCH_LIMIT)

    @upstream_guard("Failed to fetch documents")
    async def user_documents(self, nickname: str, viewer_id: uuid.UUID) -> Tuple[User, List[Document]]:
        """Публичные документы пользователя и те, которыми он поделился со зрителем"""
        owner = await self.user_repository.get_by_nickname(nickname)
        if not owner:
            raise NotFoundError("User not found")

        documents = await self.document_repository.get_by_owner_visible_to(owner.id, viewer_id)
        return owner, documents
