import logging
from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from docnotes.core.errors import NotFoundError, ValidationFailedError, upstream_guard
from docnotes.db.repositories.share_repository import ShareRepository
from docnotes.db.repositories.user_repository import UserRepository
from docnotes.domains.documents.access import AccessResolver
from docnotes.domains.documents.entities import Share
from docnotes.domains.identity.entities import User

logger = logging.getLogger(__name__)


class ShareService:
    """Реестр доступов: не более одной записи на пару (документ, зритель)"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.share_repository = ShareRepository(session)
        self.user_repository = UserRepository(session)
        self.access = AccessResolver(session)

    async def _resolve_viewer(
        self,
        document_id: uuid.UUID,
        owner_id: uuid.UUID,
        viewer_nickname: Optional[str]
    ) -> User:
        if not viewer_nickname:
            raise ValidationFailedError("Viewer nickname is required")

        await self.access.require_owner(document_id, owner_id)

        viewer = await self.user_repository.get_by_nickname(viewer_nickname)
        if not viewer:
            raise NotFoundError("User not found")
        return viewer

    @upstream_guard("Failed to share document")
    async def grant_or_update(
        self,
        document_id: uuid.UUID,
        owner_id: uuid.UUID,
        viewer_nickname: Optional[str],
        can_edit: bool
    ) -> Tuple[Share, bool]:
        """Выдача доступа или изменение can_edit у существующего. Второй элемент - создан ли доступ"""
        viewer = await self._resolve_viewer(document_id, owner_id, viewer_nickname)
        if viewer.id == owner_id:
            raise ValidationFailedError("Cannot share a document with its owner")

        created = await self.share_repository.upsert(document_id, viewer.id, can_edit)
        share = await self.share_repository.get(document_id, viewer.id)
        logger.info(
            f"Document {document_id} {'shared with' if created else 'share updated for'} "
            f"{viewer.nickname} (can_edit={can_edit})"
        )
        return share, created

    @upstream_guard("Failed to remove share")
    async def revoke(self, document_id: uuid.UUID, owner_id: uuid.UUID, viewer_nickname: Optional[str]) -> None:
        """Отзыв доступа; отзыв несуществующего доступа - не ошибка"""
        viewer = await self._resolve_viewer(document_id, owner_id, viewer_nickname)
        if await self.share_repository.delete(document_id, viewer.id):
            logger.info(f"Document {document_id} share revoked for {viewer.nickname}")

    @upstream_guard("Failed to fetch shares")
    async def list_shares(self, document_id: uuid.UUID, owner_id: uuid.UUID) -> List[Share]:
        await self.access.require_owner(document_id, owner_id)
        return await self.share_repository.get_by_document(document_id)
