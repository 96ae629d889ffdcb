from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid

from docnotes.db.models.document import Image as ImageModel
from docnotes.domains.documents.entities import ImageAsset


class ImageRepository:
    """Учет загруженных изображений блоков: блок -> путь в хранилище -> позиция/размер"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, document_id: uuid.UUID, block_id: str) -> Optional[ImageModel]:
        result = await self.session.execute(
            select(ImageModel).where(ImageModel.document_id == document_id, ImageModel.id == block_id)
        )
        return result.scalar_one_or_none()

    async def upsert(self, image: ImageAsset) -> ImageAsset:
        db_image = await self._get_model(image.document_id, image.id)

        if db_image is None:
            db_image = ImageModel(
                id=image.id,
                document_id=image.document_id,
                storage_path=image.storage_path,
                position=image.position,
                size=image.size
            )
            self.session.add(db_image)
        else:
            db_image.storage_path = image.storage_path
            db_image.position = image.position
            db_image.size = image.size

        await self.session.commit()
        await self.session.refresh(db_image)
        return self._to_domain(db_image)

    async def get(self, document_id: uuid.UUID, block_id: str) -> Optional[ImageAsset]:
        db_image = await self._get_model(document_id, block_id)
        return self._to_domain(db_image) if db_image else None

    async def get_storage_paths(self, document_id: uuid.UUID) -> List[str]:
        result = await self.session.execute(
            select(ImageModel.storage_path).where(ImageModel.document_id == document_id)
        )
        return list(result.scalars().all())

    def _to_domain(self, db_image: ImageModel) -> ImageAsset:
        return ImageAsset(
            id=db_image.id,
            document_id=db_image.document_id,
            storage_path=db_image.storage_path,
            position=db_image.position,
            size=db_image.size,
            created_at=db_image.created_at
        )
