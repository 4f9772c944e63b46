# mypy: ignore-errors
"""API tests for writes that lose a race on a unique constraint."""

from campus_hub.models import Follow
from campus_hub.services import follows


def test_duplicate_follow_insert_is_a_conflict(
    client, db_session, scheduler, mocker, auth_token, test_user, other_user
) -> None:
    follows.follow_user(db_session, test_user, other_user.id)
    db_session.commit()
    scheduler.drain()

    # Both requests saw no edge; only the unique pair stops the second insert
    mocker.patch.object(follows, "is_following", return_value=False)
    response = client.post(f"/api/v1/users/{other_user.id}/follow", headers=auth_token)

    assert response.status_code == 409
    assert scheduler.pending() == 0
    assert db_session.query(Follow).count() == 1
    db_session.refresh(other_user)
    assert other_user.follower_count == 1


def test_sequential_duplicate_follow_is_a_conflict(
    client, db_session, auth_token, test_user, other_user
) -> None:
    follows.follow_user(db_session, test_user, other_user.id)
    db_session.commit()

    response = client.post(f"/api/v1/users/{other_user.id}/follow", headers=auth_token)
    assert response.status_code == 409
    assert response.json()["detail"] == "Already following this user"
