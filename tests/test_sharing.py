"""Выдача, изменение и отзыв доступа к документу"""

import uuid

from conftest import create_document, share


def test_share_created_then_updated(client, alice, bob):
    document = create_document(client, alice)

    first = share(client, alice, document["id"], "bob", can_edit=False)
    assert first.status_code == 201
    assert first.json()["share"]["can_edit"] is False
    assert first.json()["share"]["viewer_nickname"] == "bob"

    second = share(client, alice, document["id"], "bob", can_edit=True)
    assert second.status_code == 200
    assert second.json()["share"]["can_edit"] is True

    shares = client.get(f"/documents/{document['id']}/shares", headers=alice).json()["shares"]
    assert len(shares) == 1
    assert shares[0]["can_edit"] is True


def test_share_requires_nickname(client, alice):
    document = create_document(client, alice)

    response = client.post(f"/documents/{document['id']}/share", json={"canEdit": True}, headers=alice)

    assert response.status_code == 400
    assert response.json()["reason"] == "validation_error"


def test_share_unknown_user(client, alice):
    document = create_document(client, alice)

    response = share(client, alice, document["id"], "nobody")

    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


def test_share_unknown_document(client, alice, bob):
    response = share(client, alice, str(uuid.uuid4()), "bob")
    assert response.status_code == 404


def test_only_owner_can_share(client, alice, bob, carol):
    document = create_document(client, alice)
    share(client, alice, document["id"], "bob", can_edit=True)

    response = share(client, bob, document["id"], "carol", can_edit=True)

    assert response.status_code == 404
    assert client.get(f"/documents/{document['id']}", headers=carol).status_code == 404


def test_cannot_share_with_self(client, alice):
    document = create_document(client, alice)

    response = share(client, alice, document["id"], "alice")

    assert response.status_code == 400


def test_revoke_is_idempotent(client, alice, bob):
    document = create_document(client, alice)
    share(client, alice, document["id"], "bob")

    for _ in range(2):
        response = client.delete(
            f"/documents/{document['id']}/share",
            params={"viewerNickname": "bob"},
            headers=alice
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

    assert client.get(f"/documents/{document['id']}/shares", headers=alice).json()["shares"] == []


def test_revoke_requires_nickname(client, alice):
    document = create_document(client, alice)

    response = client.delete(f"/documents/{document['id']}/share", headers=alice)

    assert response.status_code == 400


def test_shares_list_hidden_from_non_owner(client, alice, bob):
    document = create_document(client, alice)
    share(client, alice, document["id"], "bob", can_edit=True)

    response = client.get(f"/documents/{document['id']}/shares", headers=bob)

    assert response.status_code == 404
