"""Матрица прав: владелец, опубликованный, зритель, редактор, посторонний"""

import asyncio
import uuid

import pytest

from conftest import create_document, share
from docnotes.core.db import SessionLocal
from docnotes.domains.documents.access import AccessResolver


def resolve(document_id, user_id):
    async def _resolve():
        async with SessionLocal() as session:
            resolver = AccessResolver(session)
            return (
                await resolver.can_read(uuid.UUID(document_id), uuid.UUID(user_id)),
                await resolver.can_write(uuid.UUID(document_id), uuid.UUID(user_id))
            )

    return asyncio.run(_resolve())


@pytest.fixture
def users(client, alice, bob, carol, make_user):
    headers = {"alice": alice, "bob": bob, "carol": carol, "dave": make_user("dave")}
    return {
        nickname: client.get("/auth/me", headers=user_headers).json()["id"]
        for nickname, user_headers in headers.items()
    }


@pytest.mark.parametrize("is_public,who,expected", [
    (False, "alice", (True, True)),
    (False, "bob", (True, False)),
    (False, "carol", (True, True)),
    (False, "dave", (False, False)),
    (True, "alice", (True, True)),
    (True, "bob", (True, False)),
    (True, "carol", (True, True)),
    (True, "dave", (True, False)),
])
def test_access_matrix(client, alice, users, is_public, who, expected):
    document = create_document(client, alice, isPublic=is_public)
    share(client, alice, document["id"], "bob", can_edit=False)
    share(client, alice, document["id"], "carol", can_edit=True)

    assert resolve(document["id"], users[who]) == expected


def test_missing_document_has_no_access(client, users):
    assert resolve(str(uuid.uuid4()), users["alice"]) == (False, False)
