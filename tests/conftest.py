"""
Общие фикстуры тестов.

- Временная SQLite-база (aiosqlite) и каталог для файлов
- TestClient с созданием и удалением таблиц на каждый тест
- Хранилище файлов в памяти вместо Supabase/локального диска
- Регистрация пользователей и заголовки авторизации
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Dict, List

import pytest

_tmp_dir = Path(tempfile.mkdtemp(prefix="docnotes-tests-"))

# Настройки читаются при импорте приложения
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir / 'test.db'}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BLOB_BACKEND"] = "local"
os.environ["MEDIA_ROOT"] = str(_tmp_dir / "media")
os.environ["MAX_IMAGE_BYTES"] = "1024"

from fastapi.testclient import TestClient  # noqa: E402

from docnotes.core.db import drop_models  # noqa: E402
from docnotes.core.errors import BlobStoreError  # noqa: E402
from docnotes.infrastructure.storage.blob_store import BlobStore, get_blob_store  # noqa: E402
from docnotes.main import app  # noqa: E402

PASSWORD = "Secret123"


class FakeBlobStore(BlobStore):
    """Хранилище в памяти; fail_upload/fail_remove имитируют сбой"""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.removed: List[str] = []
        self.fail_upload = False
        self.fail_remove = False

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        if self.fail_upload:
            raise BlobStoreError("upload failed")
        self.objects[path] = data
        return path

    def public_url(self, path: str) -> str:
        return f"https://storage.test/document-images/{path}"

    async def remove(self, paths: List[str]) -> None:
        if self.fail_remove:
            raise BlobStoreError("remove failed")
        for path in paths:
            self.objects.pop(path, None)
            self.removed.append(path)


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def client(blob_store):
    """Клиент API с чистой базой; таблицы создаются в lifespan приложения"""
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    asyncio.run(drop_models())


def register(client: TestClient, nickname: str, display_name: str = None) -> Dict:
    payload = {
        "email": f"{nickname}@mail.com",
        "nickname": nickname,
        "password": PASSWORD
    }
    if display_name is not None:
        payload["display_name"] = display_name

    response = client.post("/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def login(client: TestClient, nickname: str) -> Dict[str, str]:
    response = client.post("/auth/login", json={"email": f"{nickname}@mail.com", "password": PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def make_user(client):
    """Регистрирует пользователя и возвращает заголовки авторизации"""

    def _make_user(nickname: str, display_name: str = None) -> Dict[str, str]:
        register(client, nickname, display_name)
        return login(client, nickname)

    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def carol(make_user):
    return make_user("carol")


def create_document(client: TestClient, headers: Dict[str, str], **payload) -> Dict:
    response = client.post("/documents", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["document"]


def share(client: TestClient, headers: Dict[str, str], document_id: str, nickname: str, can_edit: bool = False):
    return client.post(
        f"/documents/{document_id}/share",
        json={"viewerNickname": nickname, "canEdit": can_edit},
        headers=headers
    )
