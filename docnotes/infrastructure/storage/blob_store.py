import logging
from pathlib import Path
from typing import List

from fastapi.concurrency import run_in_threadpool

from docnotes.core.config import settings
from docnotes.core.errors import BlobStoreError

logger = logging.getLogger(__name__)


class BlobStore:
    """Интерфейс внешнего хранилища файлов"""

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Загрузка (с перезаписью); возвращает путь объекта"""
        raise NotImplementedError

    def public_url(self, path: str) -> str:
        raise NotImplementedError

    async def remove(self, paths: List[str]) -> None:
        raise NotImplementedError


class SupabaseBlobStore(BlobStore):
    """Хранилище Supabase Storage"""

    def __init__(self, url: str, key: str, bucket: str):
        from supabase import create_client

        try:
            self.client = create_client(url, key)
        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise BlobStoreError("Failed to initialize storage client") from e

        self.bucket = bucket
        logger.info("Supabase storage client initialized")

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        storage = self.client.storage.from_(self.bucket)
        try:
            logger.info(f"Uploading {self.bucket}/{path}")
            await run_in_threadpool(
                storage.upload,
                path,
                data,
                {"content-type": content_type, "upsert": "true"}
            )
        except Exception as e:
            logger.error(f"Error uploading file to Supabase: {e}")
            raise BlobStoreError(f"Failed to upload {path}") from e
        return path

    def public_url(self, path: str) -> str:
        return self.client.storage.from_(self.bucket).get_public_url(path)

    async def remove(self, paths: List[str]) -> None:
        if not paths:
            return
        try:
            await run_in_threadpool(self.client.storage.from_(self.bucket).remove, paths)
        except Exception as e:
            logger.error(f"Error removing files from Supabase: {e}")
            raise BlobStoreError("Failed to remove files") from e


class LocalBlobStore(BlobStore):
    """Файлы в локальном каталоге, отдаются приложением по media_url"""

    def __init__(self, root: str, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise BlobStoreError(f"Invalid storage path: {path}")
        return target

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            await run_in_threadpool(target.write_bytes, data)
        except OSError as e:
            logger.error(f"Error writing {target}: {e}")
            raise BlobStoreError(f"Failed to upload {path}") from e
        return path

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    async def remove(self, paths: List[str]) -> None:
        for path in paths:
            try:
                await run_in_threadpool(self._resolve(path).unlink, missing_ok=True)
            except OSError as e:
                logger.error(f"Error removing {path}: {e}")
                raise BlobStoreError(f"Failed to remove {path}") from e


_blob_store = None


def get_blob_store() -> BlobStore:
    """Зависимость FastAPI: хранилище, выбранное настройкой blob_backend"""
    global _blob_store
    if _blob_store is None:
        if settings.blob_backend == "supabase":
            if not settings.supabase_url or not settings.supabase_key:
                raise BlobStoreError("SUPABASE_URL and SUPABASE_KEY must be set")
            _blob_store = SupabaseBlobStore(settings.supabase_url, settings.supabase_key, settings.storage_bucket)
        else:
            _blob_store = LocalBlobStore(settings.media_root, settings.media_url)
    return _blob_store
