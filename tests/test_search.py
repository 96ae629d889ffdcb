"""Поиск документов и пользователей"""

import pytest

from conftest import create_document, share
from docnotes.domains.search.services import merge_unique


def test_short_query_rejected(client, alice):
    response = client.get("/search", params={"q": "a"}, headers=alice)

    assert response.status_code == 400
    assert response.json()["error"] == "Query must be at least 2 characters"


def test_missing_query_rejected(client, alice):
    response = client.get("/search", headers=alice)

    assert response.status_code == 400
    assert response.json()["error"] == "Query parameter is required"


def test_two_character_case_insensitive_title_match(client, alice):
    document = create_document(client, alice, title="Quarterly Report")
    create_document(client, alice, title="Other")

    response = client.get("/search", params={"q": "qU"}, headers=alice)

    assert response.status_code == 200
    body = response.json()
    assert body["query"] == "qU"
    assert [doc["id"] for doc in body["documents"]] == [document["id"]]


def test_matches_text_blocks(client, alice):
    document = create_document(
        client, alice, title="Notes",
        content={"blocks": [{"id": "b1", "type": "text", "content": "Meeting about Budget"}]}
    )

    response = client.get("/search", params={"q": "budget"}, headers=alice)

    assert [doc["id"] for doc in response.json()["documents"]] == [document["id"]]


def test_text_of_updated_content_is_searchable(client, alice):
    document = create_document(client, alice, content={"blocks": [{"id": "b1", "type": "text"}]})
    client.patch(f"/documents/{document['id']}/blocks/b1", json={"content": "zebra crossing"}, headers=alice)

    response = client.get("/search", params={"q": "zebra"}, headers=alice)

    assert len(response.json()["documents"]) == 1


def test_wildcards_are_literal(client, alice):
    create_document(client, alice, title="Plain title")
    create_document(client, alice, title="snake_title")

    response = client.get("/search", params={"q": "_t"}, headers=alice)

    assert [doc["title"] for doc in response.json()["documents"]] == ["snake_title"]


def test_search_pools(client, alice, bob, carol):
    own = create_document(client, alice, title="Topic own")
    shared = create_document(client, bob, title="Topic shared")
    share(client, bob, shared["id"], "alice")
    public = create_document(client, carol, title="Topic public", isPublic=True)
    create_document(client, carol, title="Topic private")

    response = client.get("/search", params={"q": "topic"}, headers=alice)

    found = {doc["id"] for doc in response.json()["documents"]}
    assert found == {own["id"], shared["id"], public["id"]}


def test_public_pool_capped_at_ten(client, alice, bob):
    for i in range(12):
        create_document(client, bob, title=f"Common {i}", isPublic=True)

    response = client.get("/search", params={"q": "common"}, headers=alice)

    assert len(response.json()["documents"]) == 10


def test_results_truncated_to_twenty(client, alice, bob):
    for i in range(22):
        create_document(client, alice, title=f"Mine {i} shared word")
    for i in range(5):
        create_document(client, bob, title=f"Public {i} shared word", isPublic=True)

    response = client.get("/search", params={"q": "shared word"}, headers=alice)

    documents = response.json()["documents"]
    assert len(documents) == 20
    assert all(doc["owner_nickname"] == "alice" for doc in documents)


def test_merge_unique_deduplicates_and_keeps_order():
    class Doc:
        def __init__(self, id):
            self.id = id

    a, b, c = Doc(1), Doc(2), Doc(3)

    merged = merge_unique([a, b], [b, c], limit=20)
    assert [doc.id for doc in merged] == [1, 2, 3]

    assert [doc.id for doc in merge_unique([a, b], [c], limit=2)] == [1, 2]


class TestUserSearch:

    @pytest.fixture(autouse=True)
    def users(self, make_user):
        for nickname in ["Alfred", "alina", "bob"]:
            make_user(nickname)

    @pytest.fixture
    def headers(self, alice):
        return alice

    def test_case_insensitive_and_excludes_caller(self, client, headers):
        response = client.get("/users/search", params={"nickname": "AL"}, headers=headers)

        assert response.status_code == 200
        nicknames = {user["nickname"] for user in response.json()["users"]}
        assert nicknames == {"Alfred", "alina"}

    def test_short_nickname_rejected(self, client, headers):
        response = client.get("/users/search", params={"nickname": "a"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Nickname must be at least 2 characters"

    def test_capped_at_ten(self, client, headers, make_user):
        for i in range(12):
            make_user(f"user{i:02d}")

        response = client.get("/users/search", params={"nickname": "user"}, headers=headers)

        assert len(response.json()["users"]) == 10

    def test_user_search_hides_private_fields(self, client, headers):
        response = client.get("/users/search", params={"nickname": "bob"}, headers=headers)

        assert set(response.json()["users"][0]) == {"id", "nickname", "display_name"}


def test_user_documents(client, alice, bob):
    public = create_document(client, bob, title="Public", isPublic=True)
    shared = create_document(client, bob, title="Shared")
    share(client, bob, shared["id"], "alice")
    create_document(client, bob, title="Hidden")

    response = client.get("/users/bob/documents", headers=alice)

    assert response.status_code == 200
    assert response.json()["user"]["nickname"] == "bob"
    assert {doc["id"] for doc in response.json()["documents"]} == {public["id"], shared["id"]}


def test_user_documents_unknown_user(client, alice):
    response = client.get("/users/nobody/documents", headers=alice)
    assert response.status_code == 404
