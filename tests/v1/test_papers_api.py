# mypy: ignore-errors
"""API tests for papers, hashtags and skill endorsements."""

from campus_hub.models import Paper, PaperAuthor, SkillEndorsement


def test_paper_lifecycle(
    client, db_session, scheduler, auth_token, other_auth_token, test_user, other_user
) -> None:
    response = client.post(
        "/api/v1/papers/",
        json={
            "title": "Sparse Attention on Lecture Transcripts",
            "abstract": "Summaries for the whole semester.",
            "authors": ["Alice Author", "Bob Reader"],
            "tags": ["NLP"],
            "linked_user_ids": [other_user.id],
        },
        headers=auth_token,
    )
    assert response.status_code == 201
    paper = response.json()
    assert paper["uploaded_by"] == test_user.id
    assert paper["tags"] == ["nlp"]
    scheduler.drain()

    detail = client.get(f"/api/v1/papers/{paper['id']}").json()
    assert detail["uploader"]["id"] == test_user.id
    assert [a["id"] for a in detail["linked_authors"]] == [test_user.id, other_user.id]
    by_bob = client.get(f"/api/v1/papers/by-user/{other_user.id}").json()
    assert [p["id"] for p in by_bob] == [paper["id"]]

    forbidden = client.patch(
        f"/api/v1/papers/{paper['id']}", json={"title": "Mine now"}, headers=other_auth_token
    )
    assert forbidden.status_code == 403

    patched = client.patch(
        f"/api/v1/papers/{paper['id']}",
        json={"looking_for_collaborators": True},
        headers=auth_token,
    )
    assert patched.status_code == 200
    assert patched.json()["title"] == "Sparse Attention on Lecture Transcripts"
    collaborations = client.get("/api/v1/papers/collaborations").json()
    assert [item["paper"]["id"] for item in collaborations] == [paper["id"]]

    assert client.delete(f"/api/v1/papers/{paper['id']}", headers=auth_token).status_code == 204
    assert client.get(f"/api/v1/papers/{paper['id']}").status_code == 404
    assert db_session.query(Paper).count() == 0
    assert db_session.query(PaperAuthor).count() == 0


def test_paper_upload_validation(client, auth_token) -> None:
    response = client.post(
        "/api/v1/papers/",
        json={"title": "x" * 301, "authors": ["Someone"]},
        headers=auth_token,
    )
    assert response.status_code == 422


def test_hashtag_endpoints(client, scheduler, auth_token, test_user) -> None:
    created = client.post(
        "/api/v1/posts/", json={"content": "Poster session #research"}, headers=auth_token
    ).json()
    scheduler.drain()

    trending = client.get("/api/v1/hashtags/trending").json()
    assert [(item["tag"], item["post_count"]) for item in trending] == [("research", 1)]
    assert client.get("/api/v1/hashtags/Research").json()["post_count"] == 1
    assert client.get("/api/v1/hashtags/missing").status_code == 404

    page = client.get("/api/v1/hashtags/research/posts").json()
    assert [item["post"]["id"] for item in page["items"]] == [created["id"]]
    assert page["items"][0]["author"]["id"] == test_user.id
    assert page["hashtag"]["tag"] == "research"


def test_endorsement_endpoints(
    client, db_session, scheduler, auth_token, other_auth_token, test_user, other_user
) -> None:
    test_user.skills = ["Rust"]
    db_session.commit()
    url = f"/api/v1/users/{test_user.id}/endorsements"

    response = client.post(url, json={"skill_name": "rust"}, headers=other_auth_token)
    assert response.status_code == 201
    assert response.json()["endorser_id"] == other_user.id
    duplicate = client.post(url, json={"skill_name": "Rust"}, headers=other_auth_token)
    assert duplicate.status_code == 409
    own = client.post(url, json={"skill_name": "rust"}, headers=auth_token)
    assert own.status_code == 400

    summary = client.get(url, headers=other_auth_token).json()
    assert summary["skills"] == [
        {"name": "Rust", "count": 1, "endorsed_by_viewer": True, "top_endorsers": ["Bob Reader"]}
    ]
    given = client.get("/api/v1/users/me/endorsements/given", headers=other_auth_token).json()
    assert [e["skill_name"] for e in given] == ["rust"]

    assert client.delete(f"{url}/rust", headers=other_auth_token).status_code == 204
    assert client.delete(f"{url}/rust", headers=other_auth_token).status_code == 404
    assert db_session.query(SkillEndorsement).count() == 0
