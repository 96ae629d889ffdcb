"""Совместное редактирование: от создания до конфликта версий"""

from conftest import create_document, share


def test_share_edit_and_conflict(client, alice, bob):
    document = create_document(client, alice)
    assert document["version"] == 1
    assert document["title"] == "Untitled"
    url = f"/documents/{document['id']}"

    assert share(client, alice, document["id"], "bob", can_edit=False).status_code == 201

    assert client.get(url, headers=bob).status_code == 200
    assert client.patch(url, json={"title": "By Bob", "version": 1}, headers=bob).status_code == 403

    assert share(client, alice, document["id"], "bob", can_edit=True).status_code == 200
    shares = client.get(f"{url}/shares", headers=alice).json()["shares"]
    assert len(shares) == 1 and shares[0]["can_edit"] is True

    response = client.patch(url, json={"title": "By Bob", "version": 1}, headers=bob)
    assert response.status_code == 200
    assert response.json()["document"]["version"] == 2

    response = client.patch(url, json={"title": "By Alice", "version": 1}, headers=alice)
    assert response.status_code == 409
    assert response.json()["currentVersion"] == 2
    assert response.json()["clientVersion"] == 1

    stored = client.get(url, headers=alice).json()["document"]
    assert stored["title"] == "By Bob"
