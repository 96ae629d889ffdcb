import asyncio

import pytest

from docnotes.core.errors import BlobStoreError
from docnotes.infrastructure.storage.blob_store import LocalBlobStore


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(str(tmp_path), "/media/")


def test_upload_and_remove(store, tmp_path):
    path = asyncio.run(store.upload("u1/d1/img.png", b"data", "image/png"))

    assert (tmp_path / "u1/d1/img.png").read_bytes() == b"data"
    assert store.public_url(path) == "/media/u1/d1/img.png"

    asyncio.run(store.remove([path, "u1/d1/missing.png"]))

    assert not (tmp_path / "u1/d1/img.png").exists()


def test_paths_outside_root_rejected(store):
    with pytest.raises(BlobStoreError):
        asyncio.run(store.upload("../escape.png", b"data", "image/png"))

    with pytest.raises(BlobStoreError):
        asyncio.run(store.remove(["../escape.png"]))
