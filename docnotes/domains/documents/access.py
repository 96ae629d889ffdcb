"""
Проверка прав доступа к документу.

Чтение: владелец, опубликованный документ или любой доступ (share).
Запись: владелец или доступ с can_edit. Отсутствие документа и отсутствие
прав неразличимы для вызывающего - чтобы не раскрывать факт существования.
"""

import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from docnotes.core.errors import ForbiddenError, NotFoundError, upstream_guard
from docnotes.db.repositories.document_repository import DocumentRepository


@dataclass(frozen=True)
class AccessLevel:
    can_read: bool = False
    can_write: bool = False
    is_owner: bool = False


NO_ACCESS = AccessLevel()


class AccessResolver:
    """Решает, может ли пользователь читать и/или изменять документ"""

    def __init__(self, session: AsyncSession):
        self.document_repository = DocumentRepository(session)

    @upstream_guard("Failed to check document access")
    async def resolve(self, document_id: uuid.UUID, user_id: uuid.UUID) -> AccessLevel:
        facts = await self.document_repository.get_access_facts(document_id, user_id)
        if facts is None:
            return NO_ACCESS

        owner_id, is_public, share_can_edit = facts
        is_owner = owner_id == user_id
        has_share = share_can_edit is not None

        return AccessLevel(
            can_read=is_owner or bool(is_public) or has_share,
            can_write=is_owner or share_can_edit is True,
            is_owner=is_owner
        )

    async def can_read(self, document_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return (await self.resolve(document_id, user_id)).can_read

    async def can_write(self, document_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return (await self.resolve(document_id, user_id)).can_write

    async def require_read(self, document_id: uuid.UUID, user_id: uuid.UUID) -> AccessLevel:
        """Отказ в чтении отдается как 404"""
        access = await self.resolve(document_id, user_id)
        if not access.can_read:
            raise NotFoundError()
        return access

    async def require_write(self, document_id: uuid.UUID, user_id: uuid.UUID) -> AccessLevel:
        access = await self.resolve(document_id, user_id)
        if not access.can_write:
            raise ForbiddenError()
        return access

    async def require_owner(self, document_id: uuid.UUID, user_id: uuid.UUID) -> AccessLevel:
        """Действия владельца (удаление, управление доступом); иначе 404"""
        access = await self.resolve(document_id, user_id)
        if not access.is_owner:
            raise NotFoundError()
        return access
