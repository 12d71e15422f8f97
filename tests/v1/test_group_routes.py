# tests/v1/test_group_routes.py
"""Tests for group and join-request endpoints."""

from fastapi import status


def _create_group(client, creator_id: str, username: str = "biosquad"):
    return client.post(
        "/api/v1/groups/",
        json={"name": "Bio Squad", "username": username, "creator_id": creator_id},
    )


def test_create_group(client, make_user) -> None:
    """Creating a group makes the creator an accepted member."""
    carol = make_user("Carol")

    response = _create_group(client, carol.id)

    assert response.status_code == status.HTTP_201_CREATED
    group = response.json()
    assert group["username"] == "biosquad"
    assert group["creator_id"] == carol.id
    mine = client.get(f"/api/v1/groups/my/{carol.id}").json()
    assert [g["id"] for g in mine] == [group["id"]]


def test_create_group_duplicate_username(client, make_user) -> None:
    """A taken handle is refused."""
    carol = make_user("Carol")
    _create_group(client, carol.id)

    response = _create_group(client, carol.id)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Group username already taken"


def test_join_request_flow(client, make_user) -> None:
    """A join request is listed until the creator accepts it."""
    carol = make_user("Carol")
    dev = make_user("Dev")
    group_id = _create_group(client, carol.id).json()["id"]

    join = client.post(f"/api/v1/groups/{group_id}/join", json={"user_id": dev.id})
    assert join.status_code == status.HTTP_201_CREATED
    assert join.json()["status"] == "pending"
    assert client.get(f"/api/v1/groups/my/{dev.id}").json() == []

    requests = client.get(f"/api/v1/groups/join-requests/{group_id}").json()
    assert [(r["id"], r["user_name"]) for r in requests] == [(join.json()["id"], "Dev")]

    accepted = client.patch(
        f"/api/v1/groups/members/{join.json()['id']}", json={"status": "accepted"}
    )
    assert accepted.status_code == status.HTTP_200_OK
    assert accepted.json()["status"] == "accepted"
    assert client.get(f"/api/v1/groups/join-requests/{group_id}").json() == []
    assert [g["id"] for g in client.get(f"/api/v1/groups/my/{dev.id}").json()] == [group_id]


def test_duplicate_join_request(client, make_user) -> None:
    """A second request for the same group conflicts."""
    carol = make_user("Carol")
    dev = make_user("Dev")
    group_id = _create_group(client, carol.id).json()["id"]
    client.post(f"/api/v1/groups/{group_id}/join", json={"user_id": dev.id})

    response = client.post(f"/api/v1/groups/{group_id}/join", json={"user_id": dev.id})

    assert response.status_code == status.HTTP_409_CONFLICT


def test_join_missing_group(client, make_user) -> None:
    """Joining an unknown group is a 404."""
    dev = make_user("Dev")

    response = client.post("/api/v1/groups/missing/join", json={"user_id": dev.id})

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_membership_update_only_accepts(client, make_user) -> None:
    """There is no rejected state to move a request into."""
    carol = make_user("Carol")
    dev = make_user("Dev")
    group_id = _create_group(client, carol.id).json()["id"]
    membership_id = client.post(
        f"/api/v1/groups/{group_id}/join", json={"user_id": dev.id}
    ).json()["id"]

    response = client.patch(
        f"/api/v1/groups/members/{membership_id}", json={"status": "rejected"}
    )

    assert response.status_code == 422


def test_update_missing_membership(client) -> None:
    """Accepting an unknown membership is a 404."""
    response = client.patch("/api/v1/groups/members/missing", json={"status": "accepted"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
