from typing import Optional, List, Dict, Any, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, and_, or_
from datetime import datetime
import uuid

from docnotes.db.models.document import (
    Document as DocumentModel, DocumentShare as DocumentShareModel, Image as ImageModel
)
from docnotes.db.models.user import User as UserModel
from docnotes.domains.documents.blocks import DocumentContent
from docnotes.domains.documents.entities import Document


class DocumentRepository:
    """Репозиторий для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _select_with_owner(self):
        # populate_existing: после условного UPDATE объекты в сессии устаревают
        return (
            select(DocumentModel, UserModel.nickname)
            .join(UserModel, UserModel.id == DocumentModel.owner_id)
            .execution_options(populate_existing=True)
        )

    def _shared_with(self, user_id: uuid.UUID):
        """Подзапрос: id документов, которыми поделились с пользователем"""
        return select(DocumentShareModel.document_id).where(DocumentShareModel.viewer_id == user_id)

    def _matches(self, query: str):
        return or_(
            DocumentModel.title.icontains(query, autoescape=True),
            DocumentModel.search_text.icontains(query, autoescape=True)
        )

    async def create(self, document: Document) -> Document:
        """Создание нового документа"""
        db_document = DocumentModel(
            id=document.id,
            owner_id=document.owner_id,
            title=document.title,
            content=document.content.model_dump(mode="json", exclude_none=True),
            search_text=document.get_search_text(),
            is_public=document.is_public,
            version=document.version,
            created_at=document.created_at,
            updated_at=document.updated_at
        )

        self.session.add(db_document)
        await self.session.commit()
        return await self.get_by_id(document.id)

    async def get_by_id(self, document_id: uuid.UUID) -> Optional[Document]:
        """Получение документа по id"""
        result = await self.session.execute(
            self._select_with_owner().where(DocumentModel.id == document_id)
        )
        row = result.one_or_none()
        return self._to_domain(*row) if row else None

    async def get_public(self, document_id: uuid.UUID) -> Optional[Document]:
        """Опубликованный документ (для неаутентифицированного просмотра)"""
        result = await self.session.execute(
            self._select_with_owner().where(
                DocumentModel.id == document_id,
                DocumentModel.is_public.is_(True)
            )
        )
        row = result.one_or_none()
        return self._to_domain(*row) if row else None

    async def get_access_facts(
        self,
        document_id: uuid.UUID,
        user_id: uuid.UUID
    ) -> Optional[Tuple[uuid.UUID, bool, Optional[bool]]]:
        """(owner_id, is_public, can_edit доли пользователя или None) одним запросом"""
        result = await self.session.execute(
            select(DocumentModel.owner_id, DocumentModel.is_public, DocumentShareModel.can_edit)
            .outerjoin(
                DocumentShareModel,
                and_(
                    DocumentShareModel.document_id == DocumentModel.id,
                    DocumentShareModel.viewer_id == user_id
                )
            )
            .where(DocumentModel.id == document_id)
        )
        row = result.one_or_none()
        return tuple(row) if row else None

    async def update_versioned(
        self,
        document_id: uuid.UUID,
        seen_version: int,
        values: Dict[str, Any]
    ) -> bool:
        """
        Условное обновление: применяется только если хранимая версия равна seen_version.
        Версия увеличивается на 1. Возвращает False, если другой writer успел раньше.
        """
        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.id == document_id,
                DocumentModel.version == seen_version
            )
            .values(**values, version=seen_version + 1, updated_at=datetime.utcnow())
        )

        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def delete(self, document_id: uuid.UUID) -> bool:
        """Удаление документа вместе с доступами и записями изображений"""
        await self.session.execute(
            delete(DocumentShareModel).where(DocumentShareModel.document_id == document_id)
        )
        await self.session.execute(
            delete(ImageModel).where(ImageModel.document_id == document_id)
        )
        result = await self.session.execute(
            delete(DocumentModel).where(DocumentModel.id == document_id)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def get_visible(self, user_id: uuid.UUID) -> List[Document]:
        """Свои документы и документы, которыми поделились с пользователем"""
        result = await self.session.execute(
            self._select_with_owner()
            .where(
                or_(
                    DocumentModel.owner_id == user_id,
                    DocumentModel.id.in_(self._shared_with(user_id))
                )
            )
            .order_by(DocumentModel.updated_at.desc())
        )
        return [self._to_domain(*row) for row in result.all()]

    async def search_visible(self, user_id: uuid.UUID, query: str, limit: int) -> List[Document]:
        """Поиск по своим и доступным документам"""
        result = await self.session.execute(
            self._select_with_owner()
            .where(
                or_(
                    DocumentModel.owner_id == user_id,
                    DocumentModel.id.in_(self._shared_with(user_id))
                ),
                self._matches(query)
            )
            .order_by(DocumentModel.updated_at.desc())
            .limit(limit)
        )
        return [self._to_domain(*row) for row in result.all()]

    async def search_public_of_others(self, user_id: uuid.UUID, query: str, limit: int) -> List[Document]:
        """Поиск по опубликованным документам других пользователей"""
        result = await self.session.execute(
            self._select_with_owner()
            .where(
                DocumentModel.is_public.is_(True),
                DocumentModel.owner_id != user_id,
                self._matches(query)
            )
            .order_by(DocumentModel.updated_at.desc())
            .limit(limit)
        )
        return [self._to_domain(*row) for row in result.all()]

    async def get_by_owner_visible_to(self, owner_id: uuid.UUID, viewer_id: uuid.UUID) -> List[Document]:
        """Публичные документы владельца плюс те, которыми он поделился со зрителем"""
        result = await self.session.execute(
            self._select_with_owner()
            .where(
                DocumentModel.owner_id == owner_id,
                or_(
                    DocumentModel.is_public.is_(True),
                    DocumentModel.id.in_(self._shared_with(viewer_id))
                )
            )
            .order_by(DocumentModel.updated_at.desc())
        )
        return [self._to_domain(*row) for row in result.all()]

    def _to_domain(self, db_document: DocumentModel, owner_nickname: Optional[str] = None) -> Document:
        """Преобразование модели БД в доменную сущность"""
        return Document(
            id=db_document.id,
            owner_id=db_document.owner_id,
            title=db_document.title,
            content=DocumentContent.model_validate(db_document.content or {"blocks": []}),
            is_public=db_document.is_public,
            version=db_document.version,
            owner_nickname=owner_nickname,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )
