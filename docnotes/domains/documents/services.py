import logging
import re
from typing import Optional, Callable, Dict, Any, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from docnotes.core.config import settings
from docnotes.core.errors import (
    BlobStoreError, DomainError, NotFoundError, ValidationFailedError,
    VersionConflictError, upstream_guard
)
from docnotes.db.repositories.document_repository import DocumentRepository
from docnotes.db.repositories.image_repository import ImageRepository
from docnotes.domains.documents import blocks as block_model
from docnotes.domains.documents.access import AccessResolver
from docnotes.domains.documents.blocks import Block, DocumentContent
from docnotes.domains.documents.entities import Document, ImageAsset
from docnotes.domains.documents.schemas import DocumentCreate, DocumentUpdate
from docnotes.infrastructure.storage.blob_store import BlobStore

logger = logging.getLogger(__name__)

_EXTENSION_RE = re.compile(r"^[A-Za-z0-9]{1,10}$")


class DocumentService:
    """Сервис документов: CRUD с оптимистичной блокировкой по номеру версии"""

    def __init__(self, session: AsyncSession, blob_store: Optional[BlobStore] = None):
        self.session = session
        self.blob_store = blob_store
        self.document_repository = DocumentRepository(session)
        self.image_repository = ImageRepository(session)
        self.access = AccessResolver(session)

    @upstream_guard("Failed to create document")
    async def create_document(self, document_data: DocumentCreate, owner_id: uuid.UUID) -> Document:
        """Создание нового документа (версия 1)"""
        document = Document.create_document(
            owner_id=owner_id,
            title=document_data.title,
            content=document_data.content,
            is_public=document_data.is_public
        )
        created = await self.document_repository.create(document)
        logger.info(f"Document {created.id} created by {owner_id}")
        return created

    @upstream_guard("Failed to fetch document")
    async def get_document(self, document_id: uuid.UUID, user_id: uuid.UUID) -> Document:
        """Документ, если пользователь может его читать; иначе 404"""
        await self.access.require_read(document_id, user_id)

        document = await self.document_repository.get_by_id(document_id)
        if not document:
            raise NotFoundError()
        return document

    @upstream_guard("Failed to fetch document")
    async def get_public_document(self, document_id: uuid.UUID) -> Document:
        document = await self.document_repository.get_public(document_id)
        if not document:
            raise NotFoundError("Document not found")
        return document

    @upstream_guard("Failed to update document")
    async def update_document(
        self,
        document_id: uuid.UUID,
        update_data: DocumentUpdate,
        user_id: uuid.UUID
    ) -> Document:
        """Частичное обновление; применяются только переданные поля"""
        await self.access.require_write(document_id, user_id)
        changes = update_data.changes()

        def build(current: Document) -> Dict[str, Any]:
            values = {}
            if "title" in changes:
                values["title"] = changes["title"]
            if "is_public" in changes:
                values["is_public"] = changes["is_public"]
            if "content" in changes:
                block_model.check_types_unchanged(current.content, changes["content"])
                values.update(self._content_values(changes["content"]))
            return values

        return await self._save(document_id, update_data.version, build)

    @upstream_guard("Failed to delete document")
    async def delete_document(self, document_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Удаление документа владельцем вместе с доступами и изображениями"""
        await self.access.require_owner(document_id, user_id)

        storage_paths = await self.image_repository.get_storage_paths(document_id)
        if not await self.document_repository.delete(document_id):
            raise NotFoundError()
        logger.info(f"Document {document_id} deleted by {user_id}")

        if storage_paths and self.blob_store is not None:
            try:
                await self.blob_store.remove(storage_paths)
            except BlobStoreError as e:
                # Документ уже удален; файлы остаются в хранилище
                logger.warning(f"Orphaned assets of document {document_id}: {storage_paths} ({e})")

    # Операции над блоками

    @upstream_guard("Failed to update document")
    async def insert_block(
        self,
        document_id: uuid.UUID,
        user_id: uuid.UUID,
        block_type: str,
        at_index: Optional[int] = None,
        expected_version: Optional[int] = None
    ) -> Tuple[Document, Block]:
        await self.access.require_write(document_id, user_id)
        inserted = []

        def build(current: Document) -> Dict[str, Any]:
            new_blocks, new_block = block_model.insert_block(current.content.blocks, block_type, at_index)
            inserted.append(new_block)
            return self._content_values(DocumentContent(blocks=new_blocks))

        document = await self._save(document_id, expected_version, build)
        return document, inserted[0]

    @upstream_guard("Failed to update document")
    async def update_block(
        self,
        document_id: uuid.UUID,
        user_id: uuid.UUID,
        block_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> Document:
        await self.access.require_write(document_id, user_id)

        def build(current: Document) -> Dict[str, Any]:
            new_blocks = block_model.update_block(current.content.blocks, block_id, fields)
            return self._content_values(DocumentContent(blocks=new_blocks))

        return await self._save(document_id, expected_version, build)

    @upstream_guard("Failed to update document")
    async def delete_block(
        self,
        document_id: uuid.UUID,
        user_id: uuid.UUID,
        block_id: str,
        expected_version: Optional[int] = None
    ) -> Document:
        """Удаление блока; последний блок редактируемого документа удалить нельзя"""
        await self.access.require_write(document_id, user_id)

        def build(current: Document) -> Dict[str, Any]:
            block_model.find_block(current.content.blocks, block_id)
            if len(current.content.blocks) <= 1:
                raise ValidationFailedError("Cannot delete the only block of a document")
            new_blocks = block_model.delete_block(current.content.blocks, block_id)
            return self._content_values(DocumentContent(blocks=new_blocks))

        return await self._save(document_id, expected_version, build)

    @upstream_guard("Failed to update document")
    async def move_block(
        self,
        document_id: uuid.UUID,
        user_id: uuid.UUID,
        from_index: int,
        to_index: int,
        expected_version: Optional[int] = None
    ) -> Document:
        await self.access.require_write(document_id, user_id)

        def build(current: Document) -> Dict[str, Any]:
            new_blocks = block_model.move_block(current.content.blocks, from_index, to_index)
            return self._content_values(DocumentContent(blocks=new_blocks))

        return await self._save(document_id, expected_version, build)

    @upstream_guard("Failed to upload image")
    async def attach_image(
        self,
        document_id: uuid.UUID,
        user_id: uuid.UUID,
        block_id: str,
        filename: str,
        content_type: str,
        data: bytes,
        expected_version: Optional[int] = None
    ) -> Tuple[Document, ImageAsset, str]:
        """
        Загрузка изображения блока: файл уходит во внешнее хранилище,
        блок получает публичную ссылку и alt из имени файла,
        а в images записывается путь, позиция и размер.
        """
        await self.access.require_write(document_id, user_id)

        if not (content_type or "").startswith("image/"):
            raise ValidationFailedError("Please select an image file")
        if not data:
            raise ValidationFailedError("Empty file")
        if len(data) > settings.max_image_bytes:
            raise ValidationFailedError("Image is too large")
        if self.blob_store is None:
            raise BlobStoreError("Blob store is not configured")

        current = await self._load_for_write(document_id, expected_version)
        _, block = block_model.find_block(current.content.blocks, block_id)
        if block.type != "image":
            raise ValidationFailedError("Images can only be attached to image blocks")

        extension = filename.rsplit(".", 1)[-1] if "." in filename else ""
        if not _EXTENSION_RE.match(extension):
            extension = content_type.split("/", 1)[1].split("+")[0] or "img"
        storage_path = f"{current.owner_id}/{document_id}/{block_id}.{extension}"

        previous = await self.image_repository.get(document_id, block_id)
        await self.blob_store.upload(storage_path, data, content_type)
        url = self.blob_store.public_url(storage_path)

        def build(latest: Document) -> Dict[str, Any]:
            new_blocks = block_model.update_block(
                latest.content.blocks, block_id, {"content": url, "metadata": {"alt": filename}}
            )
            return self._content_values(DocumentContent(blocks=new_blocks))

        try:
            document = await self._save(document_id, current.version, build)
        except (DomainError, SQLAlchemyError):
            if previous is None or previous.storage_path != storage_path:
                await self._discard_upload(storage_path)
            raise

        _, updated_block = block_model.find_block(document.content.blocks, block_id)
        metadata = updated_block.metadata
        image = await self.image_repository.upsert(ImageAsset(
            id=block_id,
            document_id=document_id,
            storage_path=storage_path,
            position=(metadata.position or block_model.Position()).model_dump(),
            size=(metadata.size or block_model.Size()).model_dump()
        ))
        logger.info(f"Image {storage_path} attached to block {block_id}")
        return document, image, url

    async def _discard_upload(self, storage_path: str) -> None:
        try:
            await self.blob_store.remove([storage_path])
        except BlobStoreError as e:
            logger.warning(f"Orphaned asset {storage_path}: {e}")

    async def _load_for_write(self, document_id: uuid.UUID, expected_version: Optional[int]) -> Document:
        current = await self.document_repository.get_by_id(document_id)
        if current is None:
            raise NotFoundError()

        if expected_version is not None and current.version != expected_version:
            logger.info(
                f"Version conflict on {document_id}: stored {current.version}, client {expected_version}"
            )
            raise VersionConflictError(current.version, expected_version)
        return current

    async def _save(
        self,
        document_id: uuid.UUID,
        expected_version: Optional[int],
        build: Callable[[Document], Dict[str, Any]]
    ) -> Document:
        """
        Сравнение версии и запись одним условным UPDATE.
        Если между чтением и записью документ изменил другой writer, запись отклоняется.
        """
        current = await self._load_for_write(document_id, expected_version)
        values = build(current)

        if not await self.document_repository.update_versioned(document_id, current.version, values):
            latest = await self.document_repository.get_by_id(document_id)
            if latest is None:
                raise NotFoundError()
            client_version = expected_version if expected_version is not None else current.version
            logger.info(f"Lost update race on {document_id}: stored {latest.version}, client {client_version}")
            raise VersionConflictError(latest.version, client_version)

        return await self.document_repository.get_by_id(document_id)

    def _content_values(self, content: DocumentContent) -> Dict[str, Any]:
        return {
            "content": block_model.dump_content(content),
            "search_text": block_model.text_projection(content)
        }
