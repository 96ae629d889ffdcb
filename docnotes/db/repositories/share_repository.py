from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
import uuid

from docnotes.db.models.document import DocumentShare as DocumentShareModel
from docnotes.db.models.user import User as UserModel
from docnotes.domains.documents.entities import Share


class ShareRepository:
    """Репозиторий доступов к документам (ключ - документ и зритель)"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, document_id: uuid.UUID, viewer_id: uuid.UUID) -> Optional[Share]:
        result = await self.session.execute(
            select(DocumentShareModel, UserModel.nickname)
            .join(UserModel, UserModel.id == DocumentShareModel.viewer_id)
            .where(
                DocumentShareModel.document_id == document_id,
                DocumentShareModel.viewer_id == viewer_id
            )
            .execution_options(populate_existing=True)
        )
        row = result.one_or_none()
        return self._to_domain(*row) if row else None

    async def upsert(self, document_id: uuid.UUID, viewer_id: uuid.UUID, can_edit: bool) -> bool:
        """
        Создает доступ или обновляет can_edit у существующего.
        Возвращает True, если запись была создана.
        """
        result = await self.session.execute(
            update(DocumentShareModel)
            .where(
                DocumentShareModel.document_id == document_id,
                DocumentShareModel.viewer_id == viewer_id
            )
            .values(can_edit=can_edit)
        )
        if result.rowcount:
            await self.session.commit()
            return False

        self.session.add(DocumentShareModel(document_id=document_id, viewer_id=viewer_id, can_edit=can_edit))
        try:
            await self.session.commit()
            return True
        except IntegrityError:
            # Параллельный запрос успел создать запись
            await self.session.rollback()

        await self.session.execute(
            update(DocumentShareModel)
            .where(
                DocumentShareModel.document_id == document_id,
                DocumentShareModel.viewer_id == viewer_id
            )
            .values(can_edit=can_edit)
        )
        await self.session.commit()
        return False

    async def delete(self, document_id: uuid.UUID, viewer_id: uuid.UUID) -> bool:
        result = await self.session.execute(
            delete(DocumentShareModel).where(
                DocumentShareModel.document_id == document_id,
                DocumentShareModel.viewer_id == viewer_id
            )
        )
        await self.session.commit()
        return result.rowcount > 0

    async def get_by_document(self, document_id: uuid.UUID) -> List[Share]:
        """Доступы к документу в порядке выдачи"""
        result = await self.session.execute(
            select(DocumentShareModel, UserModel.nickname)
            .join(UserModel, UserModel.id == DocumentShareModel.viewer_id)
            .where(DocumentShareModel.document_id == document_id)
            .order_by(DocumentShareModel.created_at, UserModel.nickname)
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(*row) for row in result.all()]

    def _to_domain(self, db_share: DocumentShareModel, viewer_nickname: Optional[str] = None) -> Share:
        return Share(
            document_id=db_share.document_id,
            viewer_id=db_share.viewer_id,
            can_edit=db_share.can_edit,
            viewer_nickname=viewer_nickname,
            created_at=db_share.created_at
        )
