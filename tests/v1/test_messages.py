# tests/v1/test_messages.py
"""Tests for chat history and pin endpoints."""

from datetime import datetime, timedelta, timezone

from fastapi import status

from studyhub_chat.models import ChatMessage


def test_history_by_stream(client, make_user, make_message) -> None:
    """History for a stream is returned oldest first with author details."""
    asha = make_user("Asha", profile_photo="/photos/asha.png")
    make_message(asha.id, content="first", stream="NEET")
    make_message(asha.id, content="second", stream="NEET")
    make_message(asha.id, content="elsewhere", stream="JEE")

    response = client.get("/api/v1/messages/", params={"stream": "NEET"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [m["content"] for m in data] == ["first", "second"]
    assert data[0]["user_name"] == "Asha"
    assert data[0]["user_photo"] == "/photos/asha.png"
    assert data[0]["reactions"] == {}
    assert data[0]["pinned"] is False


def test_history_by_group(client, make_user, make_group, make_message) -> None:
    """Group history only contains that group's messages."""
    carol = make_user("Carol")
    group = make_group(carol)
    make_message(carol.id, content="in group", group_id=group.id)
    make_message(carol.id, content="in community", stream="NEET")

    by_query = client.get("/api/v1/messages/", params={"group_id": group.id})
    by_path = client.get(f"/api/v1/messages/group/{group.id}")

    assert [m["content"] for m in by_query.json()] == ["in group"]
    assert by_path.json() == by_query.json()


def test_community_history_path(client, make_user, make_message) -> None:
    """The community path route matches the query route."""
    asha = make_user("Asha")
    make_message(asha.id, content="hello", stream="NEET")

    response = client.get("/api/v1/messages/community/NEET")

    assert response.status_code == status.HTTP_200_OK
    assert [m["content"] for m in response.json()] == ["hello"]


def test_history_limit(client, make_user, make_message) -> None:
    """A limit keeps the most recent messages."""
    asha = make_user("Asha")
    for text in ["a", "b", "c"]:
        make_message(asha.id, content=text, stream="NEET")

    response = client.get("/api/v1/messages/community/NEET", params={"limit": 2})

    assert [m["content"] for m in response.json()] == ["b", "c"]


def test_history_without_limit_returns_everything(client, session_factory, make_user) -> None:
    """Without a limit the whole room history comes back, oldest first."""
    asha = make_user("Asha")
    start = datetime(2026, 3, 1, tzinfo=timezone.utc)
    with session_factory() as db:
        db.add_all(
            ChatMessage(
                user_id=asha.id,
                content=f"note {i}",
                stream="NEET",
                created_at=start + timedelta(seconds=i),
            )
            for i in range(520)
        )
        db.commit()

    data = client.get("/api/v1/messages/community/NEET").json()

    assert len(data) == 520
    assert data[0]["content"] == "note 0"
    assert data[-1]["content"] == "note 519"


def test_history_requires_exactly_one_target(client) -> None:
    """Neither or both targets are refused."""
    neither = client.get("/api/v1/messages/")
    both = client.get("/api/v1/messages/", params={"stream": "NEET", "group_id": "g1"})

    assert neither.status_code == status.HTTP_400_BAD_REQUEST
    assert both.status_code == status.HTTP_400_BAD_REQUEST


def test_pin_message(client, make_user, make_message) -> None:
    """Pinning a message updates and returns it."""
    asha = make_user("Asha")
    message = make_message(asha.id, content="read this", stream="NEET")

    response = client.patch(f"/api/v1/messages/{message.id}/pin", json={"pinned": True})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["pinned"] is True
    history = client.get("/api/v1/messages/community/NEET").json()
    assert history[0]["pinned"] is True


def test_pin_unknown_message(client) -> None:
    """Pinning an unknown message is a 404."""
    response = client.patch("/api/v1/messages/missing/pin", json={"pinned": True})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Message not found"
