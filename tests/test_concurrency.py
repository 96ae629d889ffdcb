"""Гонка писателей: условный UPDATE и откат загрузки изображения"""

import asyncio
import uuid

from sqlalchemy.exc import SQLAlchemyError

from conftest import create_document
from docnotes.core.db import SessionLocal
from docnotes.db.repositories.document_repository import DocumentRepository

_update_versioned = DocumentRepository.update_versioned


async def _competing_update(document_id, seen_version):
    async with SessionLocal() as session:
        await _update_versioned(DocumentRepository(session), document_id, seen_version, {"title": "Winner"})


def test_update_with_stale_seen_version_applies_nothing(client, alice):
    document = create_document(client, alice, title="Kept")
    client.patch(f"/documents/{document['id']}", json={"title": "Second"}, headers=alice)

    async def _update():
        async with SessionLocal() as session:
            return await DocumentRepository(session).update_versioned(
                uuid.UUID(document["id"]), 1, {"title": "Stale"}
            )

    assert asyncio.run(_update()) is False

    stored = client.get(f"/documents/{document['id']}", headers=alice).json()["document"]
    assert stored["title"] == "Second"
    assert stored["version"] == 2


def test_writer_losing_race_gets_conflict(client, alice, monkeypatch):
    document = create_document(client, alice, title="Original")

    async def racing_update(self, document_id, seen_version, values):
        await _competing_update(document_id, seen_version)
        return await _update_versioned(self, document_id, seen_version, values)

    monkeypatch.setattr(DocumentRepository, "update_versioned", racing_update)

    response = client.patch(f"/documents/{document['id']}", json={"title": "Loser", "version": 1}, headers=alice)

    assert response.status_code == 409
    assert response.json()["currentVersion"] == 2
    assert response.json()["clientVersion"] == 1

    stored = client.get(f"/documents/{document['id']}", headers=alice).json()["document"]
    assert stored["title"] == "Winner"
    assert stored["version"] == 2


def test_writer_losing_race_without_version(client, alice, monkeypatch):
    document = create_document(client, alice)

    async def racing_update(self, document_id, seen_version, values):
        await _competing_update(document_id, seen_version)
        return await _update_versioned(self, document_id, seen_version, values)

    monkeypatch.setattr(DocumentRepository, "update_versioned", racing_update)

    response = client.patch(f"/documents/{document['id']}", json={"title": "Loser"}, headers=alice)

    assert response.status_code == 409
    assert response.json()["clientVersion"] == 1


class TestImageUploadRollback:

    def upload(self, client, headers, document_id):
        return client.post(
            f"/documents/{document_id}/blocks/img/image",
            files={"file": ("pic.png", b"data", "image/png")},
            headers=headers
        )

    def test_failed_write_removes_new_blob(self, client, alice, blob_store, monkeypatch):
        document = create_document(client, alice, content={"blocks": [{"id": "img", "type": "image"}]})

        async def failing_update(self, document_id, seen_version, values):
            raise SQLAlchemyError("write failed")

        monkeypatch.setattr(DocumentRepository, "update_versioned", failing_update)

        response = self.upload(client, alice, document["id"])

        assert response.status_code == 500
        assert response.json()["reason"] == "upstream_error"
        expected_path = f"{document['owner_id']}/{document['id']}/img.png"
        assert blob_store.removed == [expected_path]
        assert blob_store.objects == {}

    def test_lost_race_removes_new_blob(self, client, alice, blob_store, monkeypatch):
        document = create_document(client, alice, content={"blocks": [{"id": "img", "type": "image"}]})

        async def racing_update(self, document_id, seen_version, values):
            await _competing_update(document_id, seen_version)
            return await _update_versioned(self, document_id, seen_version, values)

        monkeypatch.setattr(DocumentRepository, "update_versioned", racing_update)

        response = self.upload(client, alice, document["id"])

        assert response.status_code == 409
        assert blob_store.objects == {}
        assert len(blob_store.removed) == 1

        stored = client.get(f"/documents/{document['id']}", headers=alice).json()["document"]
        assert stored["content"]["blocks"][0]["content"] == ""

    def test_failed_reupload_keeps_recorded_blob(self, client, alice, blob_store, monkeypatch):
        document = create_document(client, alice, content={"blocks": [{"id": "img", "type": "image"}]})
        assert self.upload(client, alice, document["id"]).status_code == 200

        async def failing_update(self, document_id, seen_version, values):
            raise SQLAlchemyError("write failed")

        monkeypatch.setattr(DocumentRepository, "update_versioned", failing_update)

        response = self.upload(client, alice, document["id"])

        assert response.status_code == 500
        assert blob_store.removed == []
        assert len(blob_store.objects) == 1
