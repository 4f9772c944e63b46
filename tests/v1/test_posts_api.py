# mypy: ignore-errors
"""API tests for posts, the feed and authentication."""

from campus_hub.services import follows


def test_requests_without_token_are_rejected(client) -> None:
    response = client.get("/api/v1/feed/")
    assert response.status_code in (401, 403)


def test_invalid_token_is_rejected(client) -> None:
    response = client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_read_me(client, auth_token, test_user) -> None:
    response = client.get("/api/v1/users/me", headers=auth_token)
    assert response.status_code == 200
    assert response.json()["id"] == test_user.id


def test_created_post_reaches_follower_feed(
    client, db_session, scheduler, auth_token, other_auth_token, test_user, other_user
) -> None:
    follows.follow_user(db_session, other_user, test_user.id)
    db_session.commit()

    response = client.post("/api/v1/posts/", json={"content": "Lab meeting at 3"}, headers=auth_token)
    assert response.status_code == 201
    post_id = response.json()["id"]

    assert client.get("/api/v1/feed/", headers=other_auth_token).json()["items"] == []
    scheduler.drain()

    feed = client.get("/api/v1/feed/", headers=other_auth_token).json()
    assert [item["post"]["id"] for item in feed["items"]] == [post_id]
    assert feed["items"][0]["author"]["id"] == test_user.id


def test_invalid_post_payload(client, auth_token) -> None:
    response = client.post("/api/v1/posts/", json={"content": ""}, headers=auth_token)
    assert response.status_code == 422


def test_get_and_delete_post(client, test_post, auth_token, other_auth_token) -> None:
    response = client.get(f"/api/v1/posts/{test_post.id}")
    assert response.status_code == 200
    assert response.json()["post"]["content"] == "Test post content"

    forbidden = client.delete(f"/api/v1/posts/{test_post.id}", headers=other_auth_token)
    assert forbidden.status_code == 403

    deleted = client.delete(f"/api/v1/posts/{test_post.id}", headers=auth_token)
    assert deleted.status_code == 200
    assert deleted.json()["comments"] == 0

    assert client.get(f"/api/v1/posts/{test_post.id}").status_code == 404


def test_delete_me_schedules_account_cleanup(
    client, db_session, scheduler, auth_token, test_user
) -> None:
    user_id = test_user.id
    response = client.delete("/api/v1/users/me", headers=auth_token)

    assert response.status_code == 202
    scheduler.drain()
    db_session.expire_all()
    assert client.get(f"/api/v1/users/{user_id}").status_code == 404
