# mypy: ignore-errors
"""Tests for skill endorsements."""

import pytest

from campus_hub.models import Achievement, SkillEndorsement
from campus_hub.services import endorsements
from campus_hub.services.errors import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def skilled_user(db_session, test_user):
    test_user.skills = ["Python", "Machine Learning"]
    db_session.commit()
    return test_user


def test_endorsement_rewards_the_endorsed_user(
    db_session, scheduler, skilled_user, other_user
) -> None:
    endorsement = endorsements.endorse_skill(db_session, other_user, skilled_user.id, " PYTHON ")
    db_session.commit()
    scheduler.drain()

    assert endorsement.skill_name == "python"
    db_session.refresh(skilled_user)
    assert skilled_user.reputation == 3
    db_session.refresh(other_user)
    assert other_user.reputation == 0


def test_endorsement_rules(db_session, skilled_user, other_user) -> None:
    with pytest.raises(ValidationError, match="own skills"):
        endorsements.endorse_skill(db_session, skilled_user, skilled_user.id, "python")
    with pytest.raises(ValidationError, match="does not have this skill"):
        endorsements.endorse_skill(db_session, other_user, skilled_user.id, "cobol")
    with pytest.raises(NotFoundError):
        endorsements.endorse_skill(db_session, other_user, 424242, "python")

    endorsements.endorse_skill(db_session, other_user, skilled_user.id, "python")
    with pytest.raises(ConflictError):
        endorsements.endorse_skill(db_session, other_user, skilled_user.id, "Python")


def test_remove_endorsement(db_session, scheduler, skilled_user, other_user) -> None:
    endorsements.endorse_skill(db_session, other_user, skilled_user.id, "python")
    db_session.commit()
    scheduler.drain()

    endorsements.remove_endorsement(db_session, other_user, skilled_user.id, "Python")
    db_session.commit()

    assert db_session.query(SkillEndorsement).count() == 0
    with pytest.raises(NotFoundError):
        endorsements.remove_endorsement(db_session, other_user, skilled_user.id, "python")


def test_endorsement_summary_per_skill(db_session, skilled_user, other_user, make_user) -> None:
    carol = make_user("Carol Peer")
    endorsements.endorse_skill(db_session, other_user, skilled_user.id, "python")
    endorsements.endorse_skill(db_session, carol, skilled_user.id, "python")
    endorsements.endorse_skill(db_session, carol, skilled_user.id, "machine learning")
    db_session.commit()

    summary = endorsements.get_endorsements(db_session, skilled_user.id, viewer_id=other_user.id)

    assert summary["skills"] == [
        {
            "name": "Python",
            "count": 2,
            "endorsed_by_viewer": True,
            "top_endorsers": ["Carol Peer", "Bob Reader"],
        },
        {
            "name": "Machine Learning",
            "count": 1,
            "endorsed_by_viewer": False,
            "top_endorsers": ["Carol Peer"],
        },
    ]
    assert endorsements.get_endorsements(db_session, 424242) == {"skills": []}
    assert [e.skill_name for e in endorsements.get_my_endorsements(db_session, carol)] == [
        "machine learning",
        "python",
    ]


def test_five_endorsements_unlock_badge(db_session, scheduler, skilled_user, make_user) -> None:
    for n in range(5):
        endorser = make_user(f"Peer {n}")
        endorsements.endorse_skill(db_session, endorser, skilled_user.id, "python")
    db_session.commit()
    scheduler.drain()

    badges = {
        a.badge for a in db_session.query(Achievement).filter_by(user_id=skilled_user.id)
    }
    assert "endorsed" in badges
    db_session.refresh(skilled_user)
    assert skilled_user.reputation == 15
