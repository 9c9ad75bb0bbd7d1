# tests/v1/test_votes.py
"""Tests for vote endpoints."""

from fastapi import status

from ventboard.models import User


def test_upvote_then_toggle_off(client, test_post, anon_headers) -> None:
    """Voting twice in the same direction withdraws the vote."""
    payload = {"target_type": "post", "target_id": test_post.id, "value": 1}

    response = client.post("/api/v1/votes/", json=payload, headers=anon_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["vote"] == 1
    assert (data["upvotes"], data["downvotes"], data["score"]) == (1, 0, 1)

    response = client.post("/api/v1/votes/", json=payload, headers=anon_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["vote"] is None
    assert data["score"] == 0


def test_switch_vote_direction(client, test_post, anon_headers) -> None:
    url = "/api/v1/votes/"
    client.post(url, json={"target_type": "post", "target_id": test_post.id, "value": 1}, headers=anon_headers)
    response = client.post(
        url,
        json={"target_type": "post", "target_id": test_post.id, "value": -1},
        headers=anon_headers,
    )
    data = response.json()
    assert data["vote"] == -1
    assert (data["upvotes"], data["downvotes"], data["score"]) == (0, 1, -1)


def test_registered_vote_moves_author_karma(client, db_session, test_post, test_user, other_auth_token) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": test_post.id, "value": -1},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_200_OK

    db_session.expire_all()
    assert db_session.get(User, test_user.id).karma == -1


def test_vote_requires_identity(client, test_post) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": test_post.id, "value": 1},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["code"] == "unauthenticated"


def test_vote_on_missing_target(client, anon_headers) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "comment", "target_id": 999, "value": 1},
        headers=anon_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "not_found"


def test_vote_value_validated(client, test_post, anon_headers) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": test_post.id, "value": 0},
        headers=anon_headers,
    )
    assert response.status_code == 422


def test_my_vote_reflects_current_state(client, test_post, anon_headers) -> None:
    url = f"/api/v1/votes/post/{test_post.id}/my-vote"
    assert client.get(url, headers=anon_headers).json() == {"vote": None}

    client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": test_post.id, "value": -1},
        headers=anon_headers,
    )
    response = client.get(url, headers=anon_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"vote": -1}

    other = client.get(url, headers={"X-Anonymous-Id": "someone-else"})
    assert other.json() == {"vote": None}


def test_vote_target_id_out_of_range(client, anon_headers) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": 99999999999999999999, "value": 1},
        headers=anon_headers,
    )
    assert response.status_code == 422

    my_vote = client.get("/api/v1/votes/post/99999999999999999999/my-vote", headers=anon_headers)
    assert my_vote.status_code == 422
